"""
Configuration management for mpd-shuffle
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

APP_NAME = "mpd-shuffle"


@dataclass
class MPDConfig:
    """Configuration for the MPD connection."""

    host: str = "localhost"
    port: int = 6600
    password: Optional[str] = None
    timeout: float = 10.0  # Socket timeout for commands (idle never times out)

    def validate(self) -> None:
        """Validate connection settings.

        Raises:
            ValueError: If the port is out of range or the timeout not positive
        """
        if not 0 < self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be between 1 and 65535")
        if self.timeout <= 0:
            raise ValueError(f"Invalid timeout: {self.timeout}. Must be positive")


@dataclass
class ShuffleConfig:
    """Configuration for queueing behaviour."""

    buffer: int = 0  # Tracks to keep queued after the current one
    tracking: bool = True  # Don't repeat tracks until everything has played
    persist: bool = False  # Keep the play history across restarts
    filters: List[str] = field(default_factory=list)
    history_file: Optional[str] = None  # Default: <data dir>/state.json

    def validate(self) -> None:
        """Validate shuffle settings.

        Raises:
            ValueError: If the buffer size is negative or filters is not a
                list of strings
        """
        if self.buffer < 0:
            raise ValueError(f"Invalid buffer size: {self.buffer}. Must not be negative")
        if not isinstance(self.filters, list) or not all(
            isinstance(f, str) for f in self.filters
        ):
            raise ValueError(f"Invalid filters: {self.filters!r}. Must be a list of strings")


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = None  # No file logging unless set
    max_file_size_mb: int = 10  # Maximum log file size before rotation
    backup_count: int = 5  # Number of rotated files to keep
    console_output: bool = True  # Log to stderr


@dataclass
class Config:
    """Main configuration object."""

    mpd: MPDConfig = field(default_factory=MPDConfig)
    shuffle: ShuffleConfig = field(default_factory=ShuffleConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_config_path() -> Path:
    """Get the main configuration file path.

    Checks for config.toml in the following order:
    1. Current working directory
    2. XDG_CONFIG_HOME/mpd-shuffle (or ~/.config/mpd-shuffle)
    """
    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / APP_NAME
    return Path.home() / ".local" / "share" / APP_NAME


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# mpd-shuffle Configuration

[mpd]
# MPD host name, IP address or unix socket path
host = "localhost"

# MPD port
port = 6600

# MPD password (optional)
# password = "secret"

# Socket timeout in seconds for MPD commands
timeout = 10.0

[shuffle]
# Number of additional songs to keep in the queue after the current song.
# Required for crossfade to work.
buffer = 0

# Don't repeat a song until every eligible song has been played
tracking = true

# Keep the play history across restarts
persist = false

# Only queue matching songs. "foo" matches title, artist or album;
# "title:foo", "artist:foo", "album:foo" match one field; a leading "!"
# excludes matches instead.
filters = []

# Custom history file (default: ~/.local/share/mpd-shuffle/state.json)
# history_file = "/path/to/state.json"

[logging]
# Log level (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL)
level = "INFO"

# Log file path (optional, no file logging by default)
# log_file = "~/.local/share/mpd-shuffle/mpd-shuffle.log"

# Maximum log file size in MB before rotation
max_file_size_mb = 10

# Number of rotated log files to keep
backup_count = 5

# Log to stderr
console_output = true
""".strip()


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file, falling back to defaults.

    Environment variables override TOML values:
    - MPD_HOST
    - MPD_PORT

    Args:
        config_path: Explicit config file (default: see get_config_path)
    """
    # Load .env file from config directory if it exists
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config_path = config_path if config_path is not None else get_config_path()
    config = Config()

    if config_path.exists():
        try:
            with open(config_path, "rb") as f:
                toml_data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            print(f"Error loading configuration from {config_path}: {e}")
            print("Using default configuration.")
            toml_data = {}

        if "mpd" in toml_data:
            mpd_data = toml_data["mpd"]
            config.mpd = MPDConfig(
                host=mpd_data.get("host", config.mpd.host),
                port=mpd_data.get("port", config.mpd.port),
                password=mpd_data.get("password"),
                timeout=mpd_data.get("timeout", config.mpd.timeout),
            )
            try:
                config.mpd.validate()
            except ValueError as e:
                print(f"Warning: Invalid mpd configuration: {e}")
                print("Using default mpd configuration.")
                config.mpd = MPDConfig()

        if "shuffle" in toml_data:
            shuffle_data = toml_data["shuffle"]
            history_file = shuffle_data.get("history_file")
            if history_file:
                history_file = str(Path(history_file).expanduser())
            filters = shuffle_data.get("filters", [])
            if isinstance(filters, str):
                filters = [filters]
            config.shuffle = ShuffleConfig(
                buffer=shuffle_data.get("buffer", config.shuffle.buffer),
                tracking=shuffle_data.get("tracking", config.shuffle.tracking),
                persist=shuffle_data.get("persist", config.shuffle.persist),
                filters=filters,
                history_file=history_file,
            )
            try:
                config.shuffle.validate()
            except ValueError as e:
                print(f"Warning: Invalid shuffle configuration: {e}")
                print("Using default shuffle configuration.")
                config.shuffle = ShuffleConfig()

        if "logging" in toml_data:
            logging_data = toml_data["logging"]
            log_file = logging_data.get("log_file")
            if log_file:
                log_file = str(Path(log_file).expanduser())
            config.logging = LoggingConfig(
                level=logging_data.get("level", config.logging.level).upper(),
                log_file=log_file,
                max_file_size_mb=logging_data.get(
                    "max_file_size_mb", config.logging.max_file_size_mb
                ),
                backup_count=logging_data.get(
                    "backup_count", config.logging.backup_count
                ),
                console_output=logging_data.get(
                    "console_output", config.logging.console_output
                ),
            )

    # Override connection settings with environment variables if present
    mpd_host = os.environ.get("MPD_HOST")
    mpd_port = os.environ.get("MPD_PORT")

    if mpd_host:
        config.mpd.host = mpd_host
    if mpd_port:
        try:
            config.mpd.port = int(mpd_port)
        except ValueError:
            print(f"Warning: Ignoring invalid MPD_PORT: {mpd_port}")

    return config


def write_default_config(config_path: Optional[Path] = None, overwrite: bool = False) -> Path:
    """Write the default configuration file.

    Args:
        config_path: Target file (default: <config dir>/config.toml)
        overwrite: Replace an existing file instead of refusing

    Returns:
        Path of the written file

    Raises:
        FileExistsError: If the file exists and overwrite is False
    """
    config_path = config_path if config_path is not None else get_config_dir() / "config.toml"
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w" if overwrite else "x", encoding="utf-8") as f:
        f.write(create_default_config() + "\n")
    return config_path
