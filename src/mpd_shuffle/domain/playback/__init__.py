"""Playback domain - MPD integration.

This domain handles:
- Connecting to MPD
- Reading queue status
- Appending tracks and switching playback
- Waiting for queue/player changes
"""

from .client import (
    connect,
    disconnect,
    get_status,
    push_track,
    switch_to,
    translate_errors,
    wait_for_change,
)
from .models import PlaybackStatus
