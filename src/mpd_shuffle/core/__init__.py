"""Core infrastructure layer - no shuffling logic.

This module provides foundation-level services:
- Configuration management (TOML)
- Logging setup (Loguru)
"""

from .config import (
    Config,
    LoggingConfig,
    MPDConfig,
    ShuffleConfig,
    create_default_config,
    get_config_dir,
    get_config_path,
    get_data_dir,
    load_config,
    write_default_config,
)
from .output import setup_loguru
