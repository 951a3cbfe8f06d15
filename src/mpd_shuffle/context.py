"""Application context for explicit state passing.

AppContext holds everything the control loop needs, so nothing in the
shuffle logic reaches for global state.
"""

import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from mpd_shuffle.core.config import Config
from mpd_shuffle.domain.library.filters import Filter, parse_filters, split_filters
from mpd_shuffle.domain.shuffle.history import PlayHistory


@dataclass
class AppContext:
    """Runtime state for one shuffler process.

    Attributes:
        host: MPD host name or socket path
        port: MPD port
        buffer_size: Tracks to keep queued after the current one
        inclusion_filters: Tracks must match one of these (if any)
        exclusion_filters: Tracks must match none of these
        history: Played tracks, or None when tracking is disabled
        password: Optional MPD password
        timeout: Socket timeout for MPD commands
        rng: Random source used for selection
    """

    host: str
    port: int
    buffer_size: int = 0
    inclusion_filters: List[Filter] = field(default_factory=list)
    exclusion_filters: List[Filter] = field(default_factory=list)
    history: Optional[PlayHistory] = None
    password: Optional[str] = None
    timeout: float = 10.0
    rng: random.Random = field(default_factory=random.Random)

    @property
    def uri(self) -> str:
        return f"{self.host}:{self.port}"

    @property
    def has_filters(self) -> bool:
        return bool(self.inclusion_filters or self.exclusion_filters)

    @classmethod
    def create(cls, config: Config) -> "AppContext":
        """Build the context from configuration.

        Malformed filters are skipped with a warning.

        Raises:
            PersistenceError: If persisted history exists but can't be loaded
        """
        inclusion, exclusion = split_filters(parse_filters(config.shuffle.filters))

        history = None
        if config.shuffle.tracking:
            path = Path(config.shuffle.history_file) if config.shuffle.history_file else None
            history = PlayHistory.load(config.shuffle.persist, path=path)

        return cls(
            host=config.mpd.host,
            port=config.mpd.port,
            buffer_size=config.shuffle.buffer,
            inclusion_filters=inclusion,
            exclusion_filters=exclusion,
            history=history,
            password=config.mpd.password,
            timeout=config.mpd.timeout,
        )
