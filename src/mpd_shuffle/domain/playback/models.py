"""
Playback domain models.

Snapshot of MPD's queue state as far as the shuffler cares about it.
"""

from typing import Any, Dict, NamedTuple, Optional


class PlaybackStatus(NamedTuple):
    """Immutable view of MPD's status response.

    Positions are zero-based indexes into the queue. current_position is
    None when nothing is selected (stopped with an empty or exhausted queue).
    """

    current_position: Optional[int] = None
    next_position: Optional[int] = None
    queue_length: int = 0

    @property
    def has_current(self) -> bool:
        return self.current_position is not None

    @property
    def has_next(self) -> bool:
        return self.next_position is not None

    @classmethod
    def from_mpd(cls, status: Dict[str, Any]) -> "PlaybackStatus":
        """Build from the dict returned by MPDClient.status()."""

        def _int(key: str) -> Optional[int]:
            value = status.get(key)
            return int(value) if value not in (None, "") else None

        return cls(
            current_position=_int("song"),
            next_position=_int("nextsong"),
            queue_length=_int("playlistlength") or 0,
        )
