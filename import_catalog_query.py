#!/usr/bin/env python

import argparse
import sqlite3
from pathlib import Path

from photo_importer import config
from photo_importer.database.ops import ImportRecordStore
from photo_importer.models import ImportedRecord


def connect_db(db_path: Path) -> sqlite3.Connection:
    if not db_path.exists():
        raise SystemExit(f"DB not found: {db_path}")
    return sqlite3.connect(db_path)


def _print_rows(records: list[ImportedRecord]):
    print("id   | on | length     | hash             | imported_at               | target")
    print("-----+----+------------+------------------+---------------------------+-------")
    for rec in records:
        imported = rec.imported_at.isoformat(timespec="seconds") if rec.imported_at else ""
        flag = "y" if rec.import_enabled else "n"
        print(f"{rec.id:4d} | {flag}  | {str(rec.original_length).rjust(10)} | {rec.original_hash[:16]} | {imported.ljust(25)} | {rec.subfolder}/{rec.file_name}")


def list_records(store: ImportRecordStore, disabled_only: bool = False):
    records = [r for r in store.iter_records() if not (disabled_only and r.import_enabled)]
    if not records:
        print("No records found.")
        return
    _print_rows(records)


def find_by_hash(store: ImportRecordStore, prefix: str):
    records = [r for r in store.iter_records() if r.original_hash.startswith(prefix.lower())]
    if not records:
        print(f"No records with hash starting with {prefix}")
        return
    _print_rows(records)


def set_enabled(store: ImportRecordStore, record_id: int, enabled: bool):
    if not store.set_import_enabled(record_id, enabled):
        print(f"No record with id={record_id}")
        return
    state = "enabled" if enabled else "disabled (will be re-imported on next run)"
    print(f"Record {record_id} {state}.")


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Query and administer the import record store.")
    p.add_argument("--db", required=True, help=f"Path to {config.STORE_FILENAME} (under your target root)")
    group = p.add_mutually_exclusive_group(required=True)
    group.add_argument("--list", action="store_true", help="List all import records")
    group.add_argument("--disabled", action="store_true", help="List records with import disabled")
    group.add_argument("--hash", help="Show records whose content hash starts with this prefix")
    group.add_argument("--disable", type=int, metavar="ID", help="Disable a record so its content is re-imported")
    group.add_argument("--enable", type=int, metavar="ID", help="Re-enable duplicate detection for a record")
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    db_path = Path(args.db).resolve()
    conn = connect_db(db_path)
    store = ImportRecordStore(conn)

    try:
        if args.list:
            list_records(store)
        elif args.disabled:
            list_records(store, disabled_only=True)
        elif args.hash:
            find_by_hash(store, args.hash)
        elif args.disable is not None:
            set_enabled(store, args.disable, False)
        elif args.enable is not None:
            set_enabled(store, args.enable, True)
    finally:
        conn.close()


if __name__ == "__main__":
    main()
