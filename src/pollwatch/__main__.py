"""Command-line entry point for the file poller."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from .actions import ActionRegistry
from .config import ConfigError, default_config, load_config
from .monitor import FileMonitor


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Poll a file and react when it changes")
    parser.add_argument(
        "path",
        nargs="?",
        help="File to watch; overrides watch.path from the configuration",
    )
    parser.add_argument(
        "--config",
        help="Path to the YAML configuration file (default: config.yaml if present)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )

    watch_path = Path(args.path) if args.path else None
    config_path = Path(args.config) if args.config else Path("config.yaml")
    try:
        if args.config is None and not config_path.exists():
            if watch_path is None:
                raise ConfigError("Either a path or a configuration file is required")
            app_config = default_config(watch_path)
        else:
            app_config = load_config(config_path, watch_path=watch_path)
    except ConfigError as exc:
        logging.error("%s", exc)
        raise SystemExit(2) from exc

    registry = ActionRegistry(app_config.actions)
    monitor = FileMonitor(app_config.watch, registry)
    if not monitor.run():
        raise SystemExit(1)


if __name__ == "__main__":
    main()
