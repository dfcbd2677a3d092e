import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .core import BatchRelocator
from .exceptions import ConfigurationError, SourceDirectoryError
from .reporting import write_outcome_csv
from .settings import load_settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def setup_logging(verbose: bool, log_file: Optional[Path] = None):
    """Sets up logging to the console and, if asked, to a file."""
    log_level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    root = logging.getLogger()
    root.setLevel(log_level)

    # Only an explicit --log-file is written; nothing is created under dest
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(file_handler)

    # Turn down exifread's own chatter (it logs "File format not recognized")
    logging.getLogger("exifread").setLevel(logging.ERROR)


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        description="Date Organizer: move photos and videos into YYYY/YYYY-MM-DD folders"
    )

    p.add_argument("src", type=Path, nargs="?", default=None,
                   help="Source directory to scan (default: $PICTURES_FOLDER)")
    p.add_argument("dest", type=Path, nargs="?", default=None,
                   help="Destination root (default: $DESTINATION_FOLDER, else the source's parent)")

    p.add_argument("--dry-run", action="store_true", default=None,
                   help="Log intended moves without modifying disk")
    p.add_argument("--ext", action="append", default=None, metavar="EXT",
                   help="Allowed extension (repeatable, e.g. --ext jpg --ext .mp4)")
    p.add_argument("--all-files", action="store_true",
                   help="Disable extension filtering")
    p.add_argument("--video-metadata", action="store_true", default=None,
                   help="Read video container dates with MediaInfo")
    p.add_argument("--no-progress", action="store_true", help="Hide the progress bar")
    p.add_argument("--report-csv", type=Path, default=None,
                   help="Write per-file outcomes to this CSV")
    p.add_argument("--log-file", type=Path, default=None, help="Also log to this file")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose, args.log_file)

    exts = [] if args.all_files else args.ext
    try:
        settings = load_settings(
            source=args.src,
            destination=args.dest,
            allowed_extensions=exts,
            dry_run=args.dry_run,
            video_metadata=args.video_metadata,
            show_progress=not args.no_progress,
        )
    except ConfigurationError as e:
        logging.error(f"Configuration error: {e}")
        return 2

    logging.info("=== Date Organizer Started ===")
    logging.info(f"Source: {settings.source}")
    logging.info(f"Dest:   {settings.destination}")
    if settings.allowed_extensions:
        logging.debug(f"Extensions: {', '.join(sorted(settings.allowed_extensions))}")
    else:
        logging.debug("Extensions: all files")

    relocator = BatchRelocator(settings)

    try:
        outcome = relocator.run()
    except SourceDirectoryError as e:
        logging.error(str(e))
        return 1
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        return 1

    if args.report_csv and not outcome.no_files_found:
        write_outcome_csv(outcome, args.report_csv)

    return 0


if __name__ == "__main__":
    sys.exit(main())
