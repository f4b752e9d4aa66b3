"""
ChatBoard Entry Point

Usage:
    python -m chatboard cgi          # Handle one CGI request
    python -m chatboard serve        # Run development web server
    python -m chatboard init-db      # Create the database schema
    python -m chatboard prune        # Enforce the retention limit
    python -m chatboard stats        # Show board statistics
    python -m chatboard config       # Show, validate, or create config
"""

import argparse
import sys
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from . import __version__
from .config import Config, load_config, resolve_config_path, create_default_config
from .errors import BoardError


def setup_logging(level: str, log_file: Optional[str] = None, max_size_mb: int = 10, backup_count: int = 3):
    """Configure logging for the application.

    Logs go to stderr so CGI responses on stdout stay clean.
    """
    log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(RotatingFileHandler(
            log_file,
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count
        ))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=log_format,
        handlers=handlers
    )


def _run_config(args, config: Config, config_path: Path) -> int:
    if args.init:
        if config_path.exists():
            print(f"{config_path} already exists", file=sys.stderr)
            return 1
        create_default_config(config_path)
        print(f"Wrote default configuration to {config_path}")
        return 0

    if args.validate:
        errors = config.validate()
        for error in errors:
            print(f"  - {error}")
        print("Configuration OK" if not errors else f"{len(errors)} error(s)")
        return 1 if errors else 0

    import toml
    print(toml.dumps(config._to_dict()))
    return 0


def _run_board_command(command: str, config: Config) -> int:
    from .core.board import MessageBoard
    from .core.maintenance import MaintenanceManager

    with MessageBoard(config) as board:
        maintenance = MaintenanceManager(board)

        if command == "init-db":
            print(f"Database ready: {board.db.path}")
        elif command == "prune":
            deleted = maintenance.run_retention()
            print(f"Deleted {deleted} messages")
        elif command == "stats":
            for key, value in maintenance.get_stats().items():
                print(f"{key:>16}: {value}")

    return 0


def main():
    """Main entry point for ChatBoard."""
    parser = argparse.ArgumentParser(
        prog="chatboard",
        description="ChatBoard - Minimal Persistent Message Board"
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"ChatBoard {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: $CHATBOARD_CONFIG or config.toml)"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: from config)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("cgi", help="Handle one CGI request from the environment")

    serve_parser = subparsers.add_parser("serve", help="Run development web server")
    serve_parser.add_argument("--host", help="Bind address")
    serve_parser.add_argument("--port", type=int, help="Bind port")

    subparsers.add_parser("init-db", help="Create database schema")
    subparsers.add_parser("prune", help="Prune messages to the retention limit")
    subparsers.add_parser("stats", help="Show board statistics")

    config_parser = subparsers.add_parser("config", help="Configuration interface")
    config_group = config_parser.add_mutually_exclusive_group()
    config_group.add_argument("--show", action="store_true", help="Show current config")
    config_group.add_argument("--validate", action="store_true", help="Validate config")
    config_group.add_argument("--init", action="store_true", help="Write default config")

    args = parser.parse_args()

    config_path = resolve_config_path(args.config)
    config = load_config(config_path)

    setup_logging(
        args.log_level or config.logging.level,
        config.logging.file or None,
        config.logging.max_size_mb,
        config.logging.backup_count
    )
    logger = logging.getLogger("chatboard")

    command = args.command or "cgi"

    if command == "config":
        sys.exit(_run_config(args, config, config_path))

    if command == "cgi":
        from .web.cgi import run_cgi
        sys.exit(run_cgi(config))

    if command == "serve":
        from .web.app import create_app
        app = create_app(config)
        logger.info(f"Starting ChatBoard v{__version__}")
        app.run(host=args.host or config.web.host, port=args.port or config.web.port)
        return

    try:
        sys.exit(_run_board_command(command, config))
    except BoardError as e:
        logger.error(f"{command} failed: {e.message}")
        sys.exit(1)


if __name__ == "__main__":
    main()
