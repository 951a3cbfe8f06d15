"""
MPD integration via python-mpd2.

Thin functional wrapper around MPDClient: every call that talks to the
daemon translates transport failures into DaemonConnectionError so the
control loop has a single error type to reconnect on.
"""

from contextlib import contextmanager
from typing import Iterator, List, Optional

from loguru import logger
from mpd import ConnectionError as MPDConnectionError
from mpd import MPDClient

from mpd_shuffle.errors import DaemonConnectionError

from .models import PlaybackStatus

# MPD's idle subsystem names; "playlist" is the queue
QUEUE_SUBSYSTEM = "playlist"
PLAYER_SUBSYSTEM = "player"
WATCHED_SUBSYSTEMS = frozenset({QUEUE_SUBSYSTEM, PLAYER_SUBSYSTEM})


@contextmanager
def translate_errors(action: str) -> Iterator[None]:
    """Re-raise socket-level failures as DaemonConnectionError."""
    try:
        yield
    except (MPDConnectionError, OSError) as e:
        raise DaemonConnectionError(f"Failed to {action}: {e}") from e


def connect(
    host: str,
    port: int,
    password: Optional[str] = None,
    timeout: Optional[float] = 10.0,
) -> MPDClient:
    """Open a connection to MPD.

    Args:
        host: Hostname, IP address or absolute path of a unix socket
        port: TCP port (ignored for unix sockets)
        password: Optional MPD password
        timeout: Socket timeout for commands; idle always blocks indefinitely

    Returns:
        Connected client

    Raises:
        DaemonConnectionError: If the daemon cannot be reached
    """
    client = MPDClient()
    client.timeout = timeout
    client.idletimeout = None

    logger.debug(f"Connecting to MPD at {host}:{port}")
    with translate_errors(f"connect to {host}:{port}"):
        client.connect(host, port)
        if password:
            client.password(password)

    logger.info(f"Connected to MPD {client.mpd_version} at {host}:{port}")
    return client


def disconnect(client: MPDClient) -> None:
    """Close the connection, ignoring errors from an already dead socket."""
    try:
        client.close()
        client.disconnect()
    except (MPDConnectionError, OSError):
        pass


def get_status(client: MPDClient) -> PlaybackStatus:
    """Fetch the current queue/playback status."""
    with translate_errors("query status"):
        status = client.status()
    logger.trace(f"status: {status}")
    return PlaybackStatus.from_mpd(status)


def push_track(client: MPDClient, uri: str) -> None:
    """Append a track to the end of the queue."""
    with translate_errors(f"add {uri}"):
        client.add(uri)


def switch_to(client: MPDClient, position: int) -> None:
    """Start playing the queue entry at position."""
    logger.debug(f"Switching to queue position {position}")
    with translate_errors(f"play position {position}"):
        client.play(position)


def wait_for_change(client: MPDClient) -> List[str]:
    """Block until the queue or the player changes.

    Other subsystems (database, mixer, options, ...) are ignored and the wait
    continues.

    Returns:
        The watched subsystems that changed

    Raises:
        DaemonConnectionError: If the connection is closed while waiting
    """
    while True:
        with translate_errors("wait for changes"):
            changed = client.idle()

        if not changed:
            raise DaemonConnectionError("MPD closed the idle stream")

        relevant = [name for name in changed if name in WATCHED_SUBSYSTEMS]
        if relevant:
            logger.trace(f"subsystems changed: {relevant}")
            return relevant

        logger.trace(f"ignoring subsystem changes: {changed}")
