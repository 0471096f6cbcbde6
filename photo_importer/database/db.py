"""
Record store connection management, one store per target root.
"""
import os
import sqlite3
import logging
from pathlib import Path
from typing import Optional

from .. import config
from ..exceptions import StoreUnavailableError
from .schema import init_schema

class DBManager:
    def __init__(self, target_root: Path, db_path: Optional[Path] = None):
        self.target_root = target_root
        self.db_path = db_path if db_path else target_root / config.STORE_FILENAME
        self._conn: Optional[sqlite3.Connection] = None

    def connect(self) -> sqlite3.Connection:
        """
        Opens the store, creating it if absent. Idempotent.

        Raises:
            StoreUnavailableError: target root not writable or store corrupt.
        """
        if self._conn:
            return self._conn

        try:
            self.target_root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreUnavailableError(f"Cannot create target root {self.target_root}: {e}") from e
        if not os.access(self.target_root, os.W_OK):
            raise StoreUnavailableError(f"Target root is not writable: {self.target_root}")

        logging.info(f"Opening record store: {self.db_path}")
        conn = None
        try:
            conn = sqlite3.connect(self.db_path)
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.execute("PRAGMA synchronous=NORMAL;")
            init_schema(conn)
        except sqlite3.Error as e:
            if conn is not None:
                conn.close()
            raise StoreUnavailableError(f"Record store {self.db_path} is unusable: {e}") from e

        self._conn = conn
        return self._conn

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None

    def __enter__(self):
        return self.connect()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
