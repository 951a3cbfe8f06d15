"""
Random song selection.

Narrows the catalog to eligible tracks (filters, then play history), picks
one uniformly at random and records it. When every eligible track has been
played the history is reset and selection starts over; that is normal
steady-state behaviour, not an error.
"""

import random
from typing import List, Optional, Sequence

from loguru import logger

from mpd_shuffle.domain.library.filters import Filter, matches
from mpd_shuffle.domain.library.models import Track
from mpd_shuffle.errors import EmptyLibraryError, FiltersExhaustedError

from .history import PlayHistory


def eligible_candidates(
    catalog: Sequence[Track],
    inclusion_filters: Sequence[Filter],
    exclusion_filters: Sequence[Filter],
) -> List[Track]:
    """Apply inclusion then exclusion filters to the catalog.

    Raises:
        FiltersExhaustedError: If either step leaves nothing. History can't
            fix this, so it is never retried.
    """
    candidates = list(catalog)

    if inclusion_filters:
        candidates = [
            track for track in candidates
            if any(matches(f, track) for f in inclusion_filters)
        ]
        if not candidates:
            raise FiltersExhaustedError(
                "No tracks match any of the filters: "
                + ", ".join(str(f) for f in inclusion_filters)
            )

    if exclusion_filters:
        candidates = [
            track for track in candidates
            if not any(matches(f, track) for f in exclusion_filters)
        ]
        if not candidates:
            raise FiltersExhaustedError(
                "Every track is excluded by: "
                + ", ".join(str(f) for f in exclusion_filters)
            )

    return candidates


def select_next(
    catalog: Sequence[Track],
    inclusion_filters: Sequence[Filter],
    exclusion_filters: Sequence[Filter],
    history: Optional[PlayHistory],
    rng: Optional[random.Random] = None,
) -> Track:
    """Pick the next track to queue.

    Args:
        catalog: Every track in the library
        inclusion_filters: A track must match at least one (if any are given)
        exclusion_filters: A track must match none
        history: Played tracks to skip, or None when tracking is disabled
        rng: Random source (default: module-level random)

    Returns:
        The chosen track, already recorded in history

    Raises:
        EmptyLibraryError: If the catalog is empty
        FiltersExhaustedError: If the filters leave no candidates
        PersistenceError: If the history cannot be saved
    """
    if not catalog:
        raise EmptyLibraryError("No songs in the MPD library")

    filtered = eligible_candidates(catalog, inclusion_filters, exclusion_filters)
    candidates = filtered

    if history is not None:
        history_cleared = False
        while True:
            candidates = [t for t in filtered if not history.has_been_played(t.uri)]
            logger.trace(f"{len(candidates)} of {len(filtered)} eligible tracks left to play")
            if candidates or history_cleared:
                break
            logger.warning("No songs left to play, resetting history")
            history.clear()
            history_cleared = True

    track = (rng or random).choice(candidates)

    if history is not None:
        history.mark_as_played(track.uri)

    return track
