import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from . import config
from .config import OrganizerConfig
from .core import DirpicApp
from .exceptions import ConfigurationError, PlacementError, SourceRootError
from .reporting import ReportGenerator


def setup_logging(log_file: Optional[Path], verbose: bool):
    """Sets up logging to the console and, optionally, a file."""
    log_level = logging.DEBUG if verbose else logging.INFO

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.insert(0, logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
        force=True,
    )

    # Silence chatty libraries
    logging.getLogger("exifread").setLevel(logging.ERROR)
    logging.getLogger("PIL").setLevel(logging.WARNING)


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        prog="dirpic",
        description="Link pictures and videos into a chronological DST/YYYY/MM/YYYY-MM-DD_/ tree.",
        epilog="Hard links need SRC and DST on the same volume; otherwise files are copied.",
    )

    p.add_argument("src", type=Path, help="Source directory to scan for images")
    p.add_argument("dest", type=Path, help="Destination directory for the chronological tree")

    p.add_argument("--boundary-hour", type=int, default=config.PREVIOUS_NIGHT_HOUR,
                   help="Pictures taken before this hour go to the previous day's album (default: %(default)s)")
    p.add_argument("--ext", action="append", default=[], metavar="EXT",
                   help="Additional file extension to treat as media (repeatable)")
    p.add_argument("--copy", action="store_true", help="Copy files instead of hard-linking")
    p.add_argument("--mtime-tolerance", type=float, default=0.0, metavar="SECONDS",
                   help="Treat a copied destination as current if its mtime is within this many seconds of the source (use 2 for FAT/exFAT)")
    p.add_argument("--dry-run", action="store_true", help="Simulate actions without modifying disk")
    p.add_argument("--fail-fast", action="store_true", help="Abort the run on the first file that cannot be placed")
    p.add_argument("--no-progress", action="store_true", help="Disable the progress bar")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    p.add_argument("--log-file", type=Path, default=None, help="Log file path (default: dest/dirpic.log)")
    p.add_argument("--report-csv", type=Path, default=None, help="Write a per-file outcome report to this CSV")

    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    dest_root = args.dest.resolve()
    src_root = args.src.resolve()

    log_file = args.log_file if args.log_file else dest_root / "dirpic.log"
    if args.dry_run and not args.log_file:
        log_file = None
    setup_logging(log_file, args.verbose)

    logging.info("=== dirpic started ===")
    logging.info(f"Source: {src_root}")
    logging.info(f"Dest:   {dest_root}")

    try:
        cfg = OrganizerConfig(
            boundary_hour=args.boundary_hour,
            link_mode="copy" if args.copy else "link",
            dry_run=args.dry_run,
            fail_fast=args.fail_fast,
            mtime_tolerance=args.mtime_tolerance,
        ).with_extra_extensions(args.ext)
    except ConfigurationError as e:
        logging.error(f"Invalid configuration: {e}")
        return 1

    app = DirpicApp(cfg)

    try:
        summary = app.organize(src_root, dest_root, progress=not args.no_progress)
    except SourceRootError as e:
        logging.error(str(e))
        return 1
    except PlacementError:
        logging.exception("Aborting run (--fail-fast).")
        return 1
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        return 1

    if args.report_csv:
        ReportGenerator(summary).write_csv(args.report_csv)

    return 0


if __name__ == "__main__":
    sys.exit(main())
