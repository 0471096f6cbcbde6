import argparse
import logging
import sys
from pathlib import Path

from .core import ImportEngine
from .database.db import DBManager
from .database.ops import ImportRecordStore
from .exceptions import StoreUnavailableError
from .reporting import ReportGenerator
from . import config

def setup_logging(target_root: Path, verbose: bool):
    """Sets up logging to both console and a file in the target root."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Create target root if it doesn't exist so we can log there
    target_root.mkdir(parents=True, exist_ok=True)
    log_file = target_root / config.LOG_FILENAME

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.FileHandler(log_file, encoding='utf-8'),
            logging.StreamHandler(sys.stdout)
        ]
    )

    # Silence chatty libraries
    logging.getLogger("exifread").setLevel(logging.ERROR)

def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Photo Importer: copy new media into a date-organized library")

    p.add_argument("src", type=Path, help="Source directory to scan")
    p.add_argument("dest", type=Path, help="Target library root (holds the import database)")

    p.add_argument("-e", "--ext", default=config.DEFAULT_EXTENSION,
                   help=f"File extension to import, case-insensitive (default: {config.DEFAULT_EXTENSION})")
    p.add_argument("--follow-symlinks", action="store_true", help="Follow symbolic links while scanning")
    p.add_argument("--no-file-dates", action="store_true",
                   help="Do not fall back to file modification time when a file has no capture date")
    p.add_argument("--dry-run", action="store_true", help="Simulate actions without modifying disk")
    p.add_argument("--progress", action="store_true", help="Show a progress bar")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    p.add_argument("--db", type=Path, default=None,
                   help=f"Custom path for SQLite DB (default: dest/{config.STORE_FILENAME})")
    p.add_argument("--skip-dirs-file", type=Path, default=None, help="File containing paths to ignore")
    p.add_argument("--report", action="store_true", help="Write a CSV preview of the import instead of importing.")
    p.add_argument("--report-csv", type=str, default="import_report.csv", help="Output path for the report CSV.")

    return p.parse_args(argv)

def load_skip_dirs(skip_file: Path) -> set[Path]:
    if not skip_file or not skip_file.exists():
        return set()

    skips = set()
    with skip_file.open("r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#"):
                skips.add(Path(line).resolve())
    return skips

def main(argv=None) -> int:
    args = parse_args(argv)

    # 1. Setup
    target_root = args.dest.resolve()
    src_root = args.src.resolve()

    setup_logging(target_root, args.verbose)

    logging.info("=== Photo Importer Started ===")
    logging.info(f"Source: {src_root}")
    logging.info(f"Target: {target_root}")

    # 2. Config
    skip_dirs = load_skip_dirs(args.skip_dirs_file) if args.skip_dirs_file else set()
    try:
        extension = config.normalize_extension(args.ext)
    except ValueError as e:
        logging.error(str(e))
        return 2

    if not src_root.is_dir():
        logging.error(f"Source directory not found: {src_root}")
        return 1

    # Check for report mode
    if args.report:
        logging.info("ENTERING REPORT MODE")
        try:
            with DBManager(target_root, args.db) as conn:
                reporter = ReportGenerator(
                    ImportRecordStore(conn), target_root, extension,
                    follow_symlinks=args.follow_symlinks,
                )
                reporter.generate_source_report(str(src_root), args.report_csv, skip_dirs)
        except StoreUnavailableError as e:
            logging.error(f"Cannot open record store: {e}")
            return 1
        logging.info(f"Report generation complete: {args.report_csv}")
        return 0

    # 3. Execution
    engine = ImportEngine(
        source_root=src_root,
        target_root=target_root,
        extension=extension,
        follow_symlinks=args.follow_symlinks,
        dry_run=args.dry_run,
        skip_dirs=skip_dirs,
        use_file_dates=not args.no_file_dates,
        show_progress=args.progress,
        db_path=args.db,
    )

    try:
        summary = engine.run()
    except StoreUnavailableError as e:
        logging.error(f"Cannot open record store, aborting import: {e}")
        return 1
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        return 1

    return 1 if summary.failed else 0

if __name__ == "__main__":
    sys.exit(main())
