"""Entry point for packetjourney."""

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from . import __version__
from .identity.backend import HttpAuthBackend
from .identity.session import IdentitySession
from .logging_setup import configure_logging
from .quests.catalog import QuestCatalog
from .settings import Settings, get_settings
from .storage.database import Database
from .storage.progress import ProgressTracker
from .ui.app import PacketJourneyApp

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="packetjourney",
        description="Follow a web request through the stack, one quest at a time",
    )
    parser.add_argument(
        "--quests-dir",
        type=Path,
        help="Directory of extra *.json quest files",
    )
    parser.add_argument(
        "--api-url",
        type=str,
        help="Base URL of the auth server (omit to play as guest only)",
    )
    parser.add_argument(
        "--db",
        type=Path,
        help="Progress database file",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log at DEBUG level",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Command-line options win over environment settings."""
    changes = {}
    if args.quests_dir is not None:
        changes["quests_dir"] = args.quests_dir.expanduser()
    if args.api_url:
        changes["api_url"] = args.api_url.rstrip("/")
    if args.db is not None:
        changes["db_path"] = args.db.expanduser()
    if args.debug:
        changes["log_level"] = "DEBUG"
    return dataclasses.replace(settings, **changes) if changes else settings


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the packetjourney application."""
    args = build_parser().parse_args(argv)

    try:
        settings = apply_overrides(get_settings(), args)
    except ValueError as exc:
        print(f"packetjourney: {exc}", file=sys.stderr)
        return 2

    log_file = settings.log_file or settings.data_dir / "packetjourney.log"
    configure_logging(settings.log_level_value, log_file)

    db = Database(settings.db_path)
    backend = HttpAuthBackend(settings.api_url) if settings.api_url else None
    if backend is None:
        logger.info("No auth server configured; guests only")

    app = PacketJourneyApp(
        settings=settings,
        catalog=QuestCatalog(quests_dir=settings.quests_dir),
        tracker=ProgressTracker(db),
        identity_session=IdentitySession(backend),
        db=db,
    )
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
