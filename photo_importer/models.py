import enum
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class Fingerprint:
    hash: str
    length: int


@dataclass(frozen=True)
class SourceFileDescriptor:
    """
    A candidate file, described once per visit.
    Hash and length come from the same read pass.
    """
    source_path: Path
    content_hash: str
    original_length: int

    @property
    def extension(self) -> str:
        return self.source_path.suffix.lower()

    @property
    def file_name(self) -> str:
        return self.source_path.name


@dataclass(frozen=True)
class Placement:
    subfolder: str
    file_name: str


@dataclass(frozen=True)
class ImportedRecord:
    """
    One file placed in the target tree.
    (original_hash, original_length) is the dedup key.
    """
    subfolder: str
    file_name: str
    original_hash: str
    original_length: int
    import_enabled: bool = True

    # Filled in by the store
    id: Optional[int] = None
    source_path: Optional[str] = None
    imported_at: Optional[datetime] = None

    def target_path(self, target_root: Path) -> Path:
        return target_root / self.subfolder / self.file_name


class Outcome(enum.Enum):
    IGNORED = "ignored"
    SKIPPED_DUPLICATE = "skipped"
    IMPORTED = "imported"
    PLANNED = "planned"          # dry run: would have been imported
    FAILED = "failed"


@dataclass
class FileResult:
    outcome: Outcome
    source: Path
    destination: Optional[Path] = None
    reimport: bool = False
    message: str = ""


@dataclass
class ImportSummary:
    imported: int = 0
    reimported: int = 0
    skipped: int = 0
    ignored: int = 0
    failed: int = 0
    planned: int = 0

    def add(self, result: FileResult):
        if result.outcome is Outcome.IMPORTED:
            self.imported += 1
            if result.reimport:
                self.reimported += 1
        elif result.outcome is Outcome.SKIPPED_DUPLICATE:
            self.skipped += 1
        elif result.outcome is Outcome.PLANNED:
            self.planned += 1
        elif result.outcome is Outcome.IGNORED:
            self.ignored += 1
        else:
            self.failed += 1

    @property
    def total(self) -> int:
        return self.imported + self.planned + self.skipped + self.ignored + self.failed
