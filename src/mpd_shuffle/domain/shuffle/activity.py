"""
Activity detection.

Decides from MPD's status whether the shuffler needs to queue anything.
The shuffler only ever tops up the queue: with no buffer it acts when the
queue has run dry, with a buffer it keeps that many tracks queued after the
current one (needed for crossfade).
"""

from dataclasses import dataclass
from typing import Union

from loguru import logger

from mpd_shuffle.domain.playback.models import PlaybackStatus


@dataclass(frozen=True)
class NotActive:
    """Nothing needs to be queued."""

    def __repr__(self) -> str:
        return "NOT_ACTIVE"


NOT_ACTIVE = NotActive()


@dataclass(frozen=True)
class Active:
    """count tracks must be queued; play_first means start the first one."""

    count: int
    play_first: bool

    def __post_init__(self) -> None:
        if self.count < 1:
            raise ValueError(f"Active count must be positive, got {self.count}")


ActivityDecision = Union[NotActive, Active]


def decide(buffer_size: int, status: PlaybackStatus) -> ActivityDecision:
    """Work out how many tracks to queue.

    Args:
        buffer_size: Tracks to keep queued after the current one
        status: Fresh MPD status

    Returns:
        NOT_ACTIVE, or Active(count, play_first)

    Raises:
        ValueError: If buffer_size is negative
    """
    if buffer_size < 0:
        raise ValueError(f"Buffer size must not be negative, got {buffer_size}")

    if not status.has_current and not status.has_next:
        # Queue is empty or played out: start one now plus the buffer
        return Active(1 + buffer_size, play_first=True)

    if buffer_size == 0:
        return NOT_ACTIVE

    if not status.has_current:
        logger.warning(f"MPD reports a next song but no current song: {status}")
        return Active(1 + buffer_size, play_first=True)

    # queue_length keeps growing when consume mode is off, so only count
    # what is left after the current song
    remaining = max(0, status.queue_length - status.current_position - 1)

    if remaining == 0:
        return Active(buffer_size, play_first=False)
    if remaining < buffer_size:
        return Active(buffer_size - remaining, play_first=False)
    return NOT_ACTIVE
