"""Tests for the play history store."""

import json

import pytest

from mpd_shuffle.domain.shuffle.history import PlayHistory, get_history_path
from mpd_shuffle.errors import PersistenceError


@pytest.fixture
def history_path(tmp_path):
    """Location for a history document in a not-yet-existing directory."""
    return tmp_path / "data" / "state.json"


class TestLoad:
    """Tests for PlayHistory.load."""

    def test_not_persisting_ignores_file(self, history_path):
        """load(False) is always empty, whatever is on disk."""
        history_path.parent.mkdir(parents=True)
        history_path.write_text(json.dumps({"alreadyPlayed": ["a"]}))

        history = PlayHistory.load(False, path=history_path)

        assert len(history) == 0
        assert history.persist is False

    def test_persisting_without_file(self, history_path):
        """A missing document gives an empty persisting store."""
        history = PlayHistory.load(True, path=history_path)
        assert len(history) == 0
        assert history.persist is True

    def test_persisting_with_file(self, history_path):
        """An existing document is restored."""
        history_path.parent.mkdir(parents=True)
        history_path.write_text(json.dumps({"alreadyPlayed": ["a", "b"]}))

        history = PlayHistory.load(True, path=history_path)

        assert history.has_been_played("a")
        assert history.has_been_played("b")
        assert not history.has_been_played("c")

    @pytest.mark.parametrize(
        "content",
        ["{not json", "[]", '{"already_played": []}', '{"alreadyPlayed": "a"}', '{"alreadyPlayed": [1]}'],
    )
    def test_malformed_document(self, history_path, content):
        """Malformed documents are a load error, not silently discarded."""
        history_path.parent.mkdir(parents=True)
        history_path.write_text(content)

        with pytest.raises(PersistenceError):
            PlayHistory.load(True, path=history_path)

    def test_undecodable_document(self, history_path):
        """Bytes that are not UTF-8 are a load error too."""
        history_path.parent.mkdir(parents=True)
        history_path.write_bytes(b'{"alreadyPlayed": ["\xff\xfe"]}')

        with pytest.raises(PersistenceError):
            PlayHistory.load(True, path=history_path)

    def test_default_path_uses_data_dir(self, tmp_path, monkeypatch):
        """Without an explicit path the XDG data directory is used."""
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))
        assert get_history_path() == tmp_path / "mpd-shuffle" / "state.json"
        assert PlayHistory.load(True).path == get_history_path()


class TestMutation:
    """Tests for mark_as_played and clear."""

    def test_in_memory_store_writes_nothing(self, history_path):
        """Non-persisting stores never touch disk."""
        history = PlayHistory.load(False, path=history_path)
        history.mark_as_played("a")
        history.clear()
        assert not history_path.exists()

    def test_mark_saves_full_document(self, history_path):
        """Each mark rewrites the whole document, creating the directory."""
        history = PlayHistory.load(True, path=history_path)
        history.mark_as_played("b")
        history.mark_as_played("a")

        assert json.loads(history_path.read_text()) == {"alreadyPlayed": ["a", "b"]}

    def test_document_has_no_persist_flag(self, history_path):
        """Only the played set is serialized."""
        history = PlayHistory.load(True, path=history_path)
        history.mark_as_played("a")
        assert set(json.loads(history_path.read_text())) == {"alreadyPlayed"}

    def test_clear_saves_empty_document(self, history_path):
        """clear() empties memory and disk."""
        history = PlayHistory.load(True, path=history_path)
        history.mark_as_played("a")
        history.clear()

        assert len(history) == 0
        assert json.loads(history_path.read_text()) == {"alreadyPlayed": []}

    def test_round_trip_through_disk(self, history_path):
        """A saved history is restored by the next process."""
        PlayHistory.load(True, path=history_path).mark_as_played("x/y.flac")
        assert "x/y.flac" in PlayHistory.load(True, path=history_path)

    def test_save_failure_is_surfaced(self, tmp_path):
        """Write errors raise PersistenceError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        history = PlayHistory.load(True, path=blocker / "state.json")

        with pytest.raises(PersistenceError):
            history.mark_as_played("a")

    def test_repr_hides_contents(self):
        """repr shows the size, not every uri."""
        history = PlayHistory(["secret/track.flac"])
        assert "secret" not in repr(history)
        assert "already_played=1" in repr(history)
