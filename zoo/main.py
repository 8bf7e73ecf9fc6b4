"""Crazy Zoo - run a zoo session from the command line."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

from dotenv import load_dotenv

from zoo.config import ZooSettings, load_settings
from zoo.core import ZooError
from zoo.engine import ZooEngine, ZooRunner
from zoo.logging_config import setup_logging
from zoo.storage import Storage, StorageError

logger = logging.getLogger(__name__)

DEFAULT_DURATION_SECONDS = 15.0


def run_session(settings: ZooSettings, duration: float, use_database: bool = True) -> int:
    """Run one zoo session on a ZooRunner and print the journal.

    Recovers the zoo from SQLite (or seeds it), starts the day/night cycle,
    drops food into every enclosure, waits for duration seconds, then saves
    the journal.

    Returns:
        Process exit code
    """
    storage = Storage(settings.data_dir, settings.database_name) if use_database else None
    engine = ZooEngine(settings, storage=storage)
    runner = ZooRunner(engine)
    runner.start()

    exit_code = 0
    try:
        if storage is not None:
            runner.call(storage.connect)
        runner.call(engine.initialize)
        runner.call(engine.start_cycle)
        runner.call(engine.drop_food_everywhere)

        time.sleep(duration)

        runner.call(engine.stop_cycle)
        journal_path = runner.call(engine.save_journal)
    except (ZooError, StorageError) as e:
        logger.error(f"Session failed: {e}", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        exit_code = 1
    except KeyboardInterrupt:
        print("\nInterrupted")
        exit_code = 130
    else:
        for line in engine.journal.get_logs():
            print(line)
        print()
        print(f"Journal saved to {journal_path}")
    finally:
        if storage is not None and storage.is_connected:
            runner.call(storage.close)
        runner.shutdown()

    return exit_code


def main() -> int:
    """Main entry point for Crazy Zoo."""
    # Load environment variables first
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Crazy Zoo - enclosure event and feeding simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  crazy-zoo                         # 15 second session, SQLite in zoo_data/
  crazy-zoo --duration 60           # Run for a minute
  crazy-zoo --no-db --journal-format xml
  crazy-zoo --config zoo.yaml       # Settings from a YAML file
        """,
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        help="Data directory (default: zoo_data/ or ZOO_DATA_DIR)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="YAML settings file",
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=DEFAULT_DURATION_SECONDS,
        metavar="S",
        help=f"Seconds to run the simulation (default: {DEFAULT_DURATION_SECONDS:g})",
    )
    parser.add_argument(
        "--journal-format",
        choices=("json", "xml"),
        help="File format for the saved journal",
    )
    parser.add_argument(
        "--no-db",
        action="store_true",
        help="Run without SQLite persistence",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging to console",
    )

    args = parser.parse_args()

    settings = load_settings(args.config)
    overrides = {}
    if args.data_dir is not None:
        overrides["data_dir"] = args.data_dir
    if args.journal_format is not None:
        overrides["journal_format"] = args.journal_format
    if overrides:
        settings = settings.model_copy(update=overrides)

    # Setup logging
    console_level = logging.DEBUG if args.debug else logging.WARNING
    log_path = setup_logging(settings.data_dir, console_level=console_level)

    from zoo import __version__

    print(f"Crazy Zoo v{__version__}")
    print(f"Data directory: {settings.data_dir.absolute()}")
    print(f"Log file: {log_path}")
    print()

    return run_session(settings, args.duration, use_database=not args.no_db)


if __name__ == "__main__":
    sys.exit(main())
