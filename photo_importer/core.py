import logging
from pathlib import Path
from typing import Set, Optional

from tqdm import tqdm

from .database.db import DBManager
from .database.ops import ImportRecordStore
from .exceptions import (
    PhotoImporterError, VerificationError, PersistError, DuplicateRecordError,
)
from .models import (
    ImportedRecord, SourceFileDescriptor, FileResult, ImportSummary, Outcome,
)
from .organization.collisions import CollisionResolver
from .organization.copier import FileCopier
from .organization.rules import PlacementPolicy
from .scanning.filesystem import SourceScanner, Classification, classify, traversal_skip_dirs
from .scanning.hasher import FileHasher
from . import config


class ImportEngine:
    """
    Imports files with one extension from a source tree into a target tree.

    Per file: classify -> describe -> lookup -> place -> resolve collision
    -> copy -> verify -> persist. Files are processed one at a time and any
    per-file error is logged and skipped; only an unusable record store
    aborts the run.
    """

    def __init__(self,
                 source_root: Path,
                 target_root: Path,
                 extension: str = config.DEFAULT_EXTENSION,
                 follow_symlinks: bool = False,
                 dry_run: bool = False,
                 skip_dirs: Optional[Set[Path]] = None,
                 use_file_dates: bool = True,
                 show_progress: bool = False,
                 db_path: Optional[Path] = None):
        self.source_root = source_root
        self.target_root = target_root
        self.extension = config.normalize_extension(extension)
        self.follow_symlinks = follow_symlinks
        self.dry_run = dry_run
        self.skip_dirs = set(skip_dirs or ())
        self.show_progress = show_progress

        self.db_manager = DBManager(target_root, db_path)
        self.hasher = FileHasher()
        self.scanner = SourceScanner(self.hasher)
        self.placement = PlacementPolicy(use_file_dates=use_file_dates)
        self.copier = FileCopier(self.hasher)

        self.store: Optional[ImportRecordStore] = None
        self.resolver: Optional[CollisionResolver] = None

    def __enter__(self):
        # Raises StoreUnavailableError, which is fatal for the run
        conn = self.db_manager.connect()
        self.store = ImportRecordStore(conn)
        self.resolver = CollisionResolver()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.store = None
        self.resolver = None
        self.db_manager.close()

    def run(self) -> ImportSummary:
        logging.info(f"Importing files from [{self.source_root}] to [{self.target_root}]")
        summary = ImportSummary()

        # Never re-import our own output when the target sits inside the source
        skip_dirs = traversal_skip_dirs(self.source_root, self.target_root, self.skip_dirs)

        with self:
            files = self.scanner.iter_files(self.source_root, skip_dirs, self.follow_symlinks)
            for path in tqdm(files, desc="Importing", unit="file", disable=not self.show_progress):
                summary.add(self.import_file(path))

        logging.info(
            f"Import complete. Imported {summary.imported} (reimported {summary.reimported}), "
            f"skipped {summary.skipped}, ignored {summary.ignored}, failed {summary.failed}"
            + (f", planned {summary.planned}" if self.dry_run else "")
            + "."
        )
        return summary

    def import_file(self, path: Path) -> FileResult:
        """Runs the full per-file pipeline. Never raises for per-file errors."""
        if self.store is None:
            raise RuntimeError("ImportEngine.import_file() called outside of an open store")

        if classify(path, self.extension) is Classification.IGNORED:
            logging.debug(f"Ignoring file because of file type mismatch [{path}].")
            return FileResult(Outcome.IGNORED, path)

        logging.info(f"Importing file [{path}]...")
        try:
            return self._import_eligible(path)
        except VerificationError as e:
            logging.error(f"ERROR: {e}")
            return FileResult(Outcome.FAILED, path, message=str(e))
        except DuplicateRecordError as e:
            logging.error(f"ERROR: file [{path}] copied but already recorded under that name: {e}")
            return FileResult(Outcome.FAILED, path, message=str(e))
        except PersistError as e:
            logging.error(f"ERROR: database insert failed for [{path}]: {e}")
            return FileResult(Outcome.FAILED, path, message=str(e))
        except (PhotoImporterError, OSError) as e:
            logging.error(f"ERROR: Failed to import file [{path}]: {e}")
            return FileResult(Outcome.FAILED, path, message=str(e))
        except Exception as e:
            logging.exception(f"ERROR: Failed to import file [{path}].")
            return FileResult(Outcome.FAILED, path, message=str(e))

    def _import_eligible(self, path: Path) -> FileResult:
        descriptor = self.scanner.describe(path)

        reimport = False
        existing = self.store.lookup(descriptor.content_hash, descriptor.original_length)
        if existing is not None:
            existing_path = existing.target_path(self.target_root)
            logging.info(f"MATCH: DB: [{existing_path}] Import: [{path}]")
            if existing.import_enabled:
                logging.info("Skipping...")
                return FileResult(Outcome.SKIPPED_DUPLICATE, path, destination=existing_path)
            logging.info("Reimporting...")
            reimport = True

        placement = self.placement.placement_for(descriptor)
        target = self.resolver.resolve(self.target_root / placement.subfolder / placement.file_name)

        if self.dry_run:
            logging.info(f"[DRY RUN] Copy {path} -> {target}")
            return FileResult(Outcome.PLANNED, path, destination=target, reimport=reimport)

        self.copier.copy(path, target)
        self.copier.verify(target, descriptor)
        self._persist(descriptor, placement.subfolder, target)

        logging.info(f"File imported from: [{path}] to [{target}].")
        return FileResult(Outcome.IMPORTED, path, destination=target, reimport=reimport)

    def _persist(self, descriptor: SourceFileDescriptor, subfolder: str, target: Path):
        record = ImportedRecord(
            subfolder=subfolder,
            file_name=target.name,
            original_hash=descriptor.content_hash,
            original_length=descriptor.original_length,
            source_path=str(descriptor.source_path),
        )
        record_id = self.store.insert(record)

        # Read-your-writes check on the row just written; an older record with
        # the same fingerprint does not count. The copy stays on disk if this fails
        stored = self.store.get(record_id)
        if stored is None or (stored.subfolder, stored.file_name) != (record.subfolder, record.file_name):
            raise PersistError(f"record for {target} not visible after insert")
