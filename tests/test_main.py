"""Tests for the control loop and reconnect policy."""

import random
from unittest.mock import MagicMock, call

import pytest
from mpd import CommandError

from mpd_shuffle.context import AppContext
from mpd_shuffle.domain.library.filters import parse_filters, split_filters
from mpd_shuffle.domain.shuffle.activity import NOT_ACTIVE, Active
from mpd_shuffle.domain.shuffle.history import PlayHistory
from mpd_shuffle.errors import DaemonConnectionError, EmptyLibraryError
from mpd_shuffle.main import queue_next, run, run_iteration


def _client(status: dict, files=("a", "b", "c")) -> MagicMock:
    """Mock MPDClient with a fixed status and library."""
    client = MagicMock()
    client.status.return_value = status
    client.listall.return_value = [{"file": f} for f in files]
    client.listallinfo.return_value = [{"file": f, "title": f.upper()} for f in files]
    return client


@pytest.fixture
def ctx() -> AppContext:
    """Context with tracking enabled, no buffer and no filters."""
    return AppContext(host="localhost", port=6600, history=PlayHistory(), rng=random.Random(7))


class TestQueueNext:
    """Tests for queue_next function."""

    def test_appends_without_switching(self, ctx):
        """Plain appends never touch playback."""
        client = _client({"playlistlength": "0"})

        track = queue_next(client, ctx)

        client.add.assert_called_once_with(track.uri)
        client.play.assert_not_called()
        assert track.uri in ctx.history

    def test_switches_when_asked(self, ctx):
        """switch_to plays the appended entry."""
        client = _client({"playlistlength": "3"})
        queue_next(client, ctx, switch_to=3)
        client.play.assert_called_once_with(3)

    def test_fetches_metadata_only_with_filters(self, ctx):
        """listallinfo is used only when filters need tags."""
        client = _client({})
        queue_next(client, ctx)
        client.listallinfo.assert_not_called()

        ctx.inclusion_filters, ctx.exclusion_filters = split_filters(parse_filters(["title:b"]))
        track = queue_next(client, ctx)
        assert track.uri == "b"
        client.listallinfo.assert_called_once()


class TestRunIteration:
    """Tests for run_iteration function."""

    def test_empty_queue_no_buffer(self, ctx):
        """Empty queue: queue one track and start playing it at position 0."""
        client = _client({"state": "stop", "playlistlength": "0"})

        decision = run_iteration(client, ctx)

        assert decision == Active(1, play_first=True)
        assert client.add.call_count == 1
        client.play.assert_called_once_with(0)
        assert len(ctx.history) == 1

    def test_played_out_queue_switches_to_new_entry(self, ctx):
        """The new entry's position is the queue length before appending."""
        client = _client({"state": "stop", "playlistlength": "4"})
        ctx.buffer_size = 2

        run_iteration(client, ctx)

        assert client.add.call_count == 3
        client.play.assert_called_once_with(4)
        assert len(ctx.history) == 3

    def test_tops_up_buffer_without_switching(self, ctx):
        """Position 3 of 5 with buffer 2 appends one track, no play."""
        client = _client({"song": "3", "nextsong": "4", "playlistlength": "5"})
        ctx.buffer_size = 2

        assert run_iteration(client, ctx) == Active(1, play_first=False)
        assert client.add.call_count == 1
        client.play.assert_not_called()

    def test_not_active(self, ctx):
        """Nothing is queued while the user's queue is playing."""
        client = _client({"song": "0", "nextsong": "1", "playlistlength": "5"})

        assert run_iteration(client, ctx) is NOT_ACTIVE
        client.add.assert_not_called()
        client.listall.assert_not_called()

    def test_catalog_refetched_per_selection(self, ctx):
        """Each selection lists the library again."""
        client = _client({"playlistlength": "0"})
        ctx.buffer_size = 2
        run_iteration(client, ctx)
        assert client.listall.call_count == 3

    def test_partial_batch_is_kept(self, ctx):
        """An error mid-batch propagates and leaves earlier tracks queued."""
        client = _client({"playlistlength": "0"})
        client.listall.side_effect = [[{"file": "a"}], []]
        ctx.buffer_size = 1

        with pytest.raises(EmptyLibraryError):
            run_iteration(client, ctx)

        client.add.assert_called_once_with("a")
        client.delete.assert_not_called()


class TestRun:
    """Tests for the reconnect policy."""

    def test_gives_up_after_quick_failures(self, ctx):
        """Three failures in quick succession end the process."""
        loop = MagicMock(side_effect=DaemonConnectionError("refused"))
        sleep = MagicMock()

        status = run(ctx, loop=loop, clock=lambda: 0.0, sleep=sleep)

        assert status == 1
        assert loop.call_count == 3
        assert sleep.call_count == 2

    def test_long_attempt_resets_counter(self, ctx):
        """A failure after a long successful run doesn't count."""
        times = iter([0.0, 1.0, 100.0, 101.0, 102.0, 103.0])
        loop = MagicMock(side_effect=EmptyLibraryError("empty"))

        run(ctx, loop=loop, clock=lambda: next(times), sleep=MagicMock())

        # 1.0 counts, 100.0 resets, then 101/102/103 exhaust the budget
        assert loop.call_count == 5

    def test_protocol_errors_are_retried(self, ctx):
        """MPD command errors go through the same policy."""
        loop = MagicMock(side_effect=CommandError("[50@0] {add} No such song"))
        assert run(ctx, loop=loop, clock=lambda: 0.0, sleep=MagicMock()) == 1

    def test_programming_errors_propagate(self, ctx):
        """Unexpected exceptions are not swallowed by the retry loop."""
        loop = MagicMock(side_effect=KeyError("bug"))
        with pytest.raises(KeyError):
            run(ctx, loop=loop, clock=lambda: 0.0, sleep=MagicMock())

    def test_retry_delay(self, ctx):
        """The configured delay is slept between attempts."""
        sleep = MagicMock()
        loop = MagicMock(side_effect=DaemonConnectionError("refused"))
        run(ctx, loop=loop, retry_delay=2.5, clock=lambda: 0.0, sleep=sleep)
        assert sleep.call_args_list == [call(2.5), call(2.5)]
