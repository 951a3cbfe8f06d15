"""Track filter parsing and evaluation.

Filters are written in a compact text form on the command line or in the
config file:

    foo             any of title/artist/album contains "foo"
    title:foo       title contains "foo"
    !artist:foo     exclude tracks whose first artist contains "foo"
    !foo            exclude tracks where any field contains "foo"

Matching is case-insensitive. A filter's polarity (invert) is kept apart from
its meaning: matches() never looks at invert, split_filters() does.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from loguru import logger

from mpd_shuffle.errors import FilterParseError, InvalidFieldError, InvalidValueError

from .models import Track

NEGATION_MARKER = "!"


class FilterField(Enum):
    """Track attribute a filter is compared against."""

    TITLE = "title"
    ARTIST = "artist"
    ALBUM = "album"
    ANY = "any"


@dataclass(frozen=True)
class Filter:
    """A single substring predicate over a track's metadata.

    value is always stored lowercase.
    """

    field: FilterField
    value: str
    invert: bool = False

    def as_field(self, field: FilterField) -> "Filter":
        """Return a copy of this filter targeting a different field."""
        return replace(self, field=field)

    def __str__(self) -> str:
        prefix = NEGATION_MARKER if self.invert else ""
        if self.field is FilterField.ANY:
            return f"{prefix}{self.value}"
        return f"{prefix}{self.field.value}:{self.value}"


def _strip_negation(text: str) -> Tuple[str, bool]:
    if text.startswith(NEGATION_MARKER):
        return text[len(NEGATION_MARKER):], True
    return text, False


def parse_field(name: str) -> FilterField:
    """Parse a field name (case-insensitive).

    Raises:
        InvalidFieldError: If the name is not title, artist, album or any
    """
    try:
        return FilterField(name.strip().lower())
    except ValueError:
        valid = ", ".join(f.value for f in FilterField)
        raise InvalidFieldError(f"Invalid filter field '{name}'. Must be one of: {valid}")


def parse_filter(text: str) -> Filter:
    """Parse a filter from its compact text form.

    Args:
        text: Filter expression, e.g. "title:foo", "!artist:bar" or "baz"

    Returns:
        Parsed Filter with a lowercased value

    Raises:
        InvalidFieldError: If the part before ':' is not a known field
        InvalidValueError: If there is nothing to match against
    """
    if ":" not in text:
        value, invert = _strip_negation(text)
        field = FilterField.ANY
    else:
        field_name, value = text.split(":", 1)
        field_name, invert = _strip_negation(field_name)
        field = parse_field(field_name)

    if not value:
        raise InvalidValueError(f"Filter '{text}' has no value to match")

    return Filter(field=field, value=value.lower(), invert=invert)


def parse_filters(texts: Iterable[str]) -> List[Filter]:
    """Parse several filter expressions, skipping malformed ones.

    Args:
        texts: Filter expressions from the CLI or config file

    Returns:
        Successfully parsed filters, in input order
    """
    filters = []
    for text in texts:
        try:
            filters.append(parse_filter(text))
        except FilterParseError as e:
            logger.warning(f"Ignoring filter '{text}': {e}")
    return filters


def _attribute(field: FilterField, track: Track) -> Optional[str]:
    if field is FilterField.TITLE:
        return track.title
    if field is FilterField.ARTIST:
        return track.artist
    if field is FilterField.ALBUM:
        return track.album
    raise ValueError(f"{field} has no single track attribute")


def matches(filter: Filter, track: Track) -> bool:
    """Check whether a track matches a filter, ignoring its polarity.

    ANY is defined as matching title, artist or album. A track missing the
    attribute never matches.
    """
    if filter.field is FilterField.ANY:
        return (
            matches(filter.as_field(FilterField.TITLE), track)
            or matches(filter.as_field(FilterField.ARTIST), track)
            or matches(filter.as_field(FilterField.ALBUM), track)
        )

    to_compare = _attribute(filter.field, track)
    return to_compare is not None and filter.value in to_compare.lower()


def split_filters(filters: Iterable[Filter]) -> Tuple[List[Filter], List[Filter]]:
    """Partition filters into (inclusion, exclusion), preserving order."""
    inclusion: List[Filter] = []
    exclusion: List[Filter] = []
    for f in filters:
        (exclusion if f.invert else inclusion).append(f)
    return inclusion, exclusion

