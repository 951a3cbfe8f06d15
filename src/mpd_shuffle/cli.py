"""
mpd-shuffle CLI - Entry point

Parses command line options, merges them over the config file and starts the
control loop.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger
from rich.console import Console

from mpd_shuffle import __version__
from mpd_shuffle.context import AppContext
from mpd_shuffle.core.config import Config, load_config, write_default_config
from mpd_shuffle.core.output import setup_loguru
from mpd_shuffle.domain.shuffle.history import PlayHistory
from mpd_shuffle.errors import PersistenceError
from mpd_shuffle.main import run

# User-facing messages; logs go through loguru
console = Console(stderr=True)


def non_negative_int(value: str) -> int:
    """argparse type for the buffer size."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="mpd-shuffle",
        description=(
            "A dead simple MPD shuffler. Keeps the queue playing with random "
            "songs without touching anything you queue yourself."
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-H", "--host", help="The hostname of the MPD server")
    parser.add_argument("-p", "--port", type=int, help="The port of the MPD server")
    parser.add_argument(
        "-b",
        "--buffer",
        type=non_negative_int,
        help=(
            "The number of additional songs to keep in the queue after the "
            "current song (required for crossfade)"
        ),
    )
    parser.add_argument(
        "-n",
        "--no-tracking",
        action="store_true",
        help="Don't keep track of which songs have been played",
    )
    parser.add_argument(
        "-P",
        "--persist",
        action="store_true",
        help="Remember played songs across restarts",
    )
    parser.add_argument(
        "-f",
        "--filter",
        dest="filters",
        action="append",
        metavar="FILTER",
        help=(
            "Only play matching songs: 'foo', 'title:foo', 'artist:foo' or "
            "'album:foo'. Prefix with '!' to exclude instead. Repeatable."
        ),
    )
    parser.add_argument("-c", "--config", type=Path, help="Path to config.toml")
    parser.add_argument(
        "--log-level",
        choices=["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Override the configured log level",
    )
    parser.add_argument(
        "--clear-history",
        action="store_true",
        help="Clear the persisted play history and exit",
    )
    parser.add_argument(
        "--init-config",
        action="store_true",
        help="Write a default config file and exit",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Let --init-config replace an existing config file",
    )
    return parser


def apply_overrides(config: Config, args: argparse.Namespace) -> Config:
    """Merge command line options over the loaded configuration."""
    if args.host:
        config.mpd.host = args.host
    if args.port is not None:
        config.mpd.port = args.port
    if args.buffer is not None:
        config.shuffle.buffer = args.buffer
    if args.no_tracking:
        config.shuffle.tracking = False
    if args.persist:
        config.shuffle.persist = True
    if args.filters:
        config.shuffle.filters = config.shuffle.filters + args.filters
    if args.log_level:
        config.logging.level = args.log_level
    return config


def clear_history(config: Config) -> int:
    """Wipe the persisted history file, replacing it if it is unreadable."""
    path = Path(config.shuffle.history_file) if config.shuffle.history_file else None
    try:
        count: Optional[int] = len(PlayHistory.load(persist=True, path=path))
    except PersistenceError as e:
        logger.warning(f"Discarding unreadable history: {e}")
        count = None

    history = PlayHistory(persist=True, path=path)
    try:
        history.clear()
    except PersistenceError as e:
        console.print(f"Error: {e}", style="bold red")
        return 1

    if count is None:
        console.print(f"Reset unreadable history at {history.path}", style="green")
    else:
        console.print(f"Cleared {count} played songs from {history.path}", style="green")
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the mpd-shuffle command."""
    args = build_parser().parse_args(argv)

    if args.init_config:
        try:
            path = write_default_config(args.config, overwrite=args.force)
        except FileExistsError as e:
            console.print(
                f"Error: {e.filename} already exists (use --force to replace it)",
                style="bold red",
            )
            sys.exit(1)
        console.print(f"Created default configuration at: {path}", style="green")
        sys.exit(0)

    config = apply_overrides(load_config(args.config), args)

    setup_loguru(
        level=config.logging.level,
        log_file=Path(config.logging.log_file) if config.logging.log_file else None,
        console_output=config.logging.console_output,
        max_file_size_mb=config.logging.max_file_size_mb,
        backup_count=config.logging.backup_count,
    )

    if args.clear_history:
        sys.exit(clear_history(config))

    try:
        ctx = AppContext.create(config)
    except PersistenceError as e:
        console.print(f"Error: {e}", style="bold red")
        sys.exit(1)

    logger.debug(f"using uri: {ctx.uri}")
    logger.info(
        f"Shuffling {ctx.uri} (buffer={ctx.buffer_size}, "
        f"tracking={ctx.history is not None}, "
        f"filters={len(ctx.inclusion_filters) + len(ctx.exclusion_filters)})"
    )

    try:
        sys.exit(run(ctx))
    except KeyboardInterrupt:
        logger.info("Interrupted, exiting")
        sys.exit(0)


if __name__ == "__main__":
    main()
