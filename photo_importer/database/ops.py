import sqlite3
from datetime import datetime, UTC
from typing import Optional, Iterator

from ..exceptions import DatabaseError, DuplicateRecordError, PersistError
from ..models import ImportedRecord

_COLUMNS = "id, subfolder, file_name, original_hash, original_length, import_enabled, source_path, imported_at"


class ImportRecordStore:
    """
    Lookup/insert of ImportedRecords for a single target root.

    ``set_import_enabled`` is the administration path; the import engine
    only ever calls ``lookup`` and ``insert``.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def lookup(self, original_hash: str, original_length: int) -> Optional[ImportedRecord]:
        """
        Returns the authoritative record for a fingerprint, or None.

        With several matches, the earliest enabled record wins; if none is
        enabled, the most recent disabled one is returned.
        """
        try:
            cur = self.conn.execute(f"""
                SELECT {_COLUMNS}
                FROM imported_files
                WHERE original_hash = ? AND original_length = ?
                ORDER BY import_enabled DESC,
                         CASE WHEN import_enabled = 1 THEN id ELSE -id END
                LIMIT 1
            """, (original_hash, original_length))
            row = cur.fetchone()
        except sqlite3.Error as e:
            raise DatabaseError(f"Lookup failed for {original_hash}/{original_length}: {e}") from e
        return self._to_record(row) if row else None

    def insert(self, rec: ImportedRecord) -> int:
        """
        Persists a new record and returns its id.

        Raises:
            DuplicateRecordError: a record already claims this subfolder/file_name.
            PersistError: any other storage failure.
        """
        now_iso = datetime.now(UTC).isoformat()
        try:
            with self.conn:
                cur = self.conn.execute("""
                    INSERT INTO imported_files (
                        subfolder, file_name, original_hash, original_length,
                        import_enabled, source_path, imported_at
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                """, (
                    rec.subfolder, rec.file_name, rec.original_hash, rec.original_length,
                    int(rec.import_enabled), rec.source_path, now_iso
                ))
        except sqlite3.IntegrityError as e:
            raise DuplicateRecordError(f"Record for {rec.subfolder}/{rec.file_name} already exists: {e}") from e
        except (sqlite3.Error, ValueError) as e:
            # ValueError: names that cannot be encoded (undecodable bytes on disk)
            raise PersistError(f"Insert of {rec.subfolder}/{rec.file_name} failed: {e}") from e

        if cur.lastrowid is None:
            raise PersistError("Database INSERT failed to return a row ID.")
        return cur.lastrowid

    def get(self, record_id: int) -> Optional[ImportedRecord]:
        try:
            cur = self.conn.execute(f"SELECT {_COLUMNS} FROM imported_files WHERE id = ?", (record_id,))
            row = cur.fetchone()
        except sqlite3.Error as e:
            raise DatabaseError(f"Fetch of record {record_id} failed: {e}") from e
        return self._to_record(row) if row else None

    def set_import_enabled(self, record_id: int, enabled: bool) -> bool:
        """Returns False if no record has that id."""
        with self.conn:
            cur = self.conn.execute(
                "UPDATE imported_files SET import_enabled = ? WHERE id = ?",
                (int(enabled), record_id),
            )
        return cur.rowcount > 0

    def iter_records(self) -> Iterator[ImportedRecord]:
        cur = self.conn.execute(f"SELECT {_COLUMNS} FROM imported_files ORDER BY id")
        for row in cur:
            yield self._to_record(row)

    def count(self) -> int:
        return self.conn.execute("SELECT COUNT(*) FROM imported_files").fetchone()[0]

    def _to_record(self, row) -> ImportedRecord:
        rid, subfolder, file_name, h, length, enabled, source, imported_at = row
        return ImportedRecord(
            subfolder=subfolder,
            file_name=file_name,
            original_hash=h,
            original_length=length,
            import_enabled=bool(enabled),
            id=rid,
            source_path=source,
            imported_at=datetime.fromisoformat(imported_at) if imported_at else None,
        )
