"""
mpd-shuffle - control loop and reconnect policy

The shuffler never touches what the user queued. It waits for MPD to report
a queue or player change, checks whether the queue is about to run dry, and
if so appends random tracks.
"""

import time
from typing import Callable, NoReturn, Optional

from loguru import logger
from mpd import MPDClient, MPDError

from mpd_shuffle.context import AppContext
from mpd_shuffle.domain import library, playback
from mpd_shuffle.domain.library.models import Track
from mpd_shuffle.domain.shuffle import Active, ActivityDecision, decide, select_next
from mpd_shuffle.errors import ShuffleError

# Give up after this many failed connections in a row
MAX_ATTEMPTS = 3

# If an attempt lasted longer than this, assume it was successful and reset the counter
ATTEMPT_INTERVAL = 10.0

# Pause between reconnect attempts (seconds)
RETRY_DELAY = 1.0


def queue_next(
    client: MPDClient, ctx: AppContext, switch_to: Optional[int] = None
) -> Track:
    """Append one random track to the queue.

    Args:
        client: Connected MPD client
        ctx: Application context
        switch_to: Queue position to start playing after appending, if any

    Returns:
        The queued track
    """
    catalog = library.fetch_catalog(client, with_metadata=ctx.has_filters)
    track = select_next(
        catalog,
        ctx.inclusion_filters,
        ctx.exclusion_filters,
        ctx.history,
        rng=ctx.rng,
    )

    logger.info(f"Queueing {track.uri}")
    playback.push_track(client, track.uri)

    if switch_to is not None:
        playback.switch_to(client, switch_to)

    logger.trace(f"history: {ctx.history!r}")
    return track


def run_iteration(client: MPDClient, ctx: AppContext) -> ActivityDecision:
    """Check the queue once and top it up if needed.

    A failure part-way through a batch leaves the tracks already queued in
    place.

    Returns:
        The decision that was acted on
    """
    status = playback.get_status(client)
    decision = decide(ctx.buffer_size, status)
    logger.debug(f"activity: {decision!r} ({status})")

    if isinstance(decision, Active):
        # The queue is zero-indexed, so the old length is the new track's position
        switch_to = status.queue_length if decision.play_first else None
        queue_next(client, ctx, switch_to=switch_to)

        for _ in range(decision.count - 1):
            queue_next(client, ctx)

    return decision


def event_loop(ctx: AppContext) -> NoReturn:
    """Connect and keep the queue topped up until something fails.

    Raises:
        ShuffleError: On connection loss or a selection failure
        MPDError: On an MPD protocol error
    """
    client = playback.connect(ctx.host, ctx.port, password=ctx.password, timeout=ctx.timeout)
    try:
        while True:
            run_iteration(client, ctx)
            logger.trace("Watching queue and player")
            playback.wait_for_change(client)
    finally:
        playback.disconnect(client)


def run(
    ctx: AppContext,
    max_attempts: int = MAX_ATTEMPTS,
    attempt_interval: float = ATTEMPT_INTERVAL,
    retry_delay: float = RETRY_DELAY,
    loop: Callable[[AppContext], None] = event_loop,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Run the event loop, reconnecting after failures.

    An attempt that fails within attempt_interval of the previous one counts
    towards max_attempts; a longer-lived one resets the counter.

    Returns:
        Exit status (1 once the attempts are used up)
    """
    attempts = 0
    last_attempt_at = clock()

    while attempts < max_attempts:
        try:
            loop(ctx)
        except (ShuffleError, MPDError) as e:
            logger.error(f"Error in event loop: {e}")
            now = clock()
            if now - last_attempt_at > attempt_interval:
                logger.debug("Attempt interval elapsed, resetting attempt counter")
                attempts = 0
            else:
                attempts += 1
            last_attempt_at = now
        else:
            raise RuntimeError("event loop should never return")

        if attempts < max_attempts:
            sleep(retry_delay)

    logger.error(f"Failed to run event loop {max_attempts} times, exiting")
    return 1
