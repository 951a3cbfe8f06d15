"""
Music library domain models.

Contains data structures for representing tracks as reported by MPD.
"""

from types import MappingProxyType
from typing import Any, Dict, Mapping, NamedTuple, Optional, Tuple


class Track(NamedTuple):
    """Represents a track in the MPD database.

    The uri is MPD's "file" value, the path relative to the music directory.
    It is the only identity used by the play history.
    """
    uri: str
    title: Optional[str] = None
    artists: Tuple[str, ...] = ()  # In the order MPD reports them
    album: Optional[str] = None
    tags: Mapping[str, str] = MappingProxyType({})  # Read-only, lowercased tag names

    @property
    def artist(self) -> Optional[str]:
        """First listed artist, or None if the track has no artist tag."""
        return self.artists[0] if self.artists else None

    @classmethod
    def from_mpd(cls, entry: Dict[str, Any]) -> "Track":
        """Build a Track from a python-mpd2 song dict.

        Multi-valued tags arrive as lists; single values as strings. The
        album is looked up case-insensitively since MPD tag names are not
        normalised across versions.

        Args:
            entry: Song dict from listall/listallinfo/playlistinfo

        Returns:
            Track with metadata filled in where present

        Raises:
            KeyError: If the entry has no "file" key
        """
        tags: Dict[str, str] = {}
        artists: Tuple[str, ...] = ()
        for key, value in entry.items():
            if key == "file":
                continue
            if key.lower() == "artist":
                artists = tuple(value) if isinstance(value, list) else (value,)
            if isinstance(value, list):
                value = value[0] if value else ""
            tags[key.lower()] = str(value)

        return cls(
            uri=entry["file"],
            title=tags.get("title"),
            artists=artists,
            album=tags.get("album"),
            tags=MappingProxyType(tags),
        )
