"""
Catalog queries against the MPD database.

The catalog is fetched fresh for every selection so library updates are
picked up without restarting.
"""

from typing import List

from loguru import logger
from mpd import MPDClient

from mpd_shuffle.domain.playback.client import translate_errors

from .models import Track


def fetch_catalog(client: MPDClient, with_metadata: bool) -> List[Track]:
    """List every track in the MPD database.

    listall only returns paths, which is all the selector needs when no
    filters are configured. listallinfo carries the tags filters look at.

    Args:
        client: Connected MPD client
        with_metadata: Whether title/artist/album tags are needed

    Returns:
        All tracks known to MPD (directories and playlists are skipped)
    """
    with translate_errors("list the library"):
        entries = client.listallinfo() if with_metadata else client.listall()

    tracks = [Track.from_mpd(entry) for entry in entries if "file" in entry]
    logger.debug(f"Received {len(tracks)} tracks from MPD")
    return tracks
