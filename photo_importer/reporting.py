import csv
import logging
from pathlib import Path
from typing import Optional, Set

from .database.ops import ImportRecordStore
from .exceptions import PhotoImporterError
from .organization.collisions import CollisionResolver
from .organization.rules import PlacementPolicy
from .scanning.filesystem import SourceScanner, Classification, classify, traversal_skip_dirs
from . import config

HEADERS = ["Source Path", "Status", "Destination Path", "Notes"]


class ReportGenerator:
    """
    Read-only preview of what an import run would do with a source tree.
    Nothing is copied and the record store is not written.
    """

    def __init__(self,
                 store: ImportRecordStore,
                 target_root: Path,
                 extension: str = config.DEFAULT_EXTENSION,
                 placement: Optional[PlacementPolicy] = None,
                 follow_symlinks: bool = False):
        self.store = store
        self.target_root = target_root
        self.extension = config.normalize_extension(extension)
        self.scanner = SourceScanner()
        self.placement = placement or PlacementPolicy()
        self.resolver = CollisionResolver()
        self.follow_symlinks = follow_symlinks

    def generate_source_report(self, source_root: str, output_csv: str, skip_dirs: Optional[Set[Path]] = None):
        """
        Walks the source tree the same way an import run would and writes
        one CSV row per file.
        """
        root = Path(source_root)
        if not root.exists():
            raise FileNotFoundError(f"Source path {source_root} does not exist.")

        logging.info(f"Generating report for {source_root} -> {output_csv}")

        processed_count = 0
        with open(output_csv, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(HEADERS)

            skips = traversal_skip_dirs(root, self.target_root, skip_dirs)
            for file_path in self.scanner.iter_files(root, skips, self.follow_symlinks):
                processed_count += 1
                if processed_count % 1000 == 0:
                    logging.info(f"Analyzed {processed_count} files...")
                writer.writerow(self._analyze_file(file_path))

        logging.info(f"Report complete. Analyzed {processed_count} files.")

    def _analyze_file(self, path: Path) -> list:
        str_path = str(path)

        if classify(path, self.extension) is Classification.IGNORED:
            return [str_path, "Ignored", "", f"Extension is not {self.extension}"]

        try:
            descriptor = self.scanner.describe(path)
            existing = self.store.lookup(descriptor.content_hash, descriptor.original_length)
        except PhotoImporterError as e:
            return [str_path, "Error", "", str(e)]

        if existing is not None and existing.import_enabled:
            return [str_path, "Duplicate", str(existing.target_path(self.target_root)), f"Record ID {existing.id}"]

        placement = self.placement.placement_for(descriptor)
        dest = self.resolver.resolve(self.target_root / placement.subfolder / placement.file_name)
        if existing is not None:
            return [str_path, "Reimport", str(dest), f"Record ID {existing.id} is disabled"]
        return [str_path, "New", str(dest), "Pending Import"]
