"""CLI entry point for teamboard."""

import argparse
from pathlib import Path

from . import __version__
from .config import Settings
from .logging import setup_logging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="teamboard",
        description="Password-gated team task board for the terminal",
    )
    parser.add_argument(
        "--state-file",
        type=Path,
        default=None,
        help="YAML file that mirrors the board locally (read at startup, rewritten on change)",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Ignore the remote store even if TEAMBOARD_REMOTE_URL is set",
    )
    parser.add_argument(
        "--seed",
        action="store_true",
        help="Install default people, sprint and work items if the board is empty, then exit",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase logging verbosity (-v for INFO, -vv for DEBUG)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Path to write logs to file",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> Settings:
    """Settings from the environment, overridden by CLI flags."""
    settings_kwargs: dict = {}
    if args.state_file:
        settings_kwargs["state_file"] = args.state_file
    if args.offline:
        settings_kwargs["offline"] = True
    if args.verbose:
        settings_kwargs["verbose"] = args.verbose
    if args.log_file:
        settings_kwargs["log_file"] = args.log_file
    return Settings(**settings_kwargs)


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = parse_args(argv)
    settings = build_settings(args)

    setup_logging(settings.verbose, settings.log_file)

    if args.seed:
        from .cli.seed import run_seed

        raise SystemExit(run_seed(settings))

    # Import here so --seed never loads Textual
    from .app import run

    run(settings)


if __name__ == "__main__":
    main()
