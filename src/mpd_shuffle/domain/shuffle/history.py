"""
Play history store.

Remembers which tracks have already been queued so every eligible track is
played once before any repeats. Optionally persisted as a small JSON
document so the guarantee survives restarts:

    {"alreadyPlayed": ["Artist/Album/01 Track.flac", ...]}
"""

import json
from pathlib import Path
from typing import Iterable, Optional, Set

from loguru import logger

from mpd_shuffle.core.config import get_data_dir
from mpd_shuffle.errors import PersistenceError

HISTORY_FILE_NAME = "state.json"
ALREADY_PLAYED_KEY = "alreadyPlayed"


def get_history_path() -> Path:
    """Default location of the persisted history document."""
    return get_data_dir() / HISTORY_FILE_NAME


class PlayHistory:
    """Set of track URIs queued since the last reset.

    Whether the store is persisted is decided once, at construction; callers
    never branch on it. Not safe for concurrent mutation.
    """

    def __init__(
        self,
        already_played: Optional[Iterable[str]] = None,
        persist: bool = False,
        path: Optional[Path] = None,
    ):
        self._already_played: Set[str] = set(already_played or ())
        self._persist = persist
        self._path = path if path is not None else get_history_path()

    @classmethod
    def load(cls, persist: bool, path: Optional[Path] = None) -> "PlayHistory":
        """Create the history for this process.

        Args:
            persist: Save to / restore from disk. When False any file on disk
                is ignored and the history lives in memory only.
            path: Document location (default: <data dir>/state.json)

        Returns:
            Empty history, or the stored one if persisting and a file exists

        Raises:
            PersistenceError: If the stored document cannot be read or parsed
        """
        path = path if path is not None else get_history_path()

        if not persist or not path.exists():
            return cls(persist=persist, path=path)

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise PersistenceError(f"Failed to read history file {path}: {e}") from e
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Failed to parse history file {path}: {e}") from e

        already_played = data.get(ALREADY_PLAYED_KEY) if isinstance(data, dict) else None
        if not isinstance(already_played, list) or not all(
            isinstance(uri, str) for uri in already_played
        ):
            raise PersistenceError(
                f"History file {path} has no '{ALREADY_PLAYED_KEY}' list of tracks"
            )

        history = cls(already_played, persist=persist, path=path)
        logger.info(f"Loaded {len(history)} played tracks from {path}")
        return history

    @property
    def persist(self) -> bool:
        return self._persist

    @property
    def path(self) -> Path:
        return self._path

    def __len__(self) -> int:
        return len(self._already_played)

    def __contains__(self, uri: object) -> bool:
        return uri in self._already_played

    def __repr__(self) -> str:
        # The set can hold the whole library; only show its size
        return f"PlayHistory(persist={self._persist}, already_played={len(self)})"

    def has_been_played(self, uri: str) -> bool:
        return uri in self._already_played

    def mark_as_played(self, uri: str) -> None:
        """Record a track and save if persisting.

        Raises:
            PersistenceError: If the document cannot be written
        """
        self._already_played.add(uri)
        self._save()

    def clear(self) -> None:
        """Forget every played track and save if persisting.

        Raises:
            PersistenceError: If the document cannot be written
        """
        self._already_played.clear()
        self._save()

    def _save(self) -> None:
        if not self._persist:
            return

        document = {ALREADY_PLAYED_KEY: sorted(self._already_played)}
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(document), encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Failed to write history file {self._path}: {e}") from e

        logger.trace(f"Saved {len(self)} played tracks to {self._path}")
