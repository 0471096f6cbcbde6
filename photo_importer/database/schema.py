"""
Database schema definitions.
"""
import sqlite3
import logging

CURRENT_SCHEMA_VERSION = 1

def init_schema(conn: sqlite3.Connection):
    """
    Applies the record store schema to the database.
    Idempotent: safe to run on every startup.
    """
    with conn:
        # 1. Version Tracking (For future migrations)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS schema_version (
                version INTEGER PRIMARY KEY
            );
        """)

        cur = conn.cursor()
        cur.execute("SELECT version FROM schema_version")
        if not cur.fetchone():
            conn.execute("INSERT INTO schema_version (version) VALUES (?)", (CURRENT_SCHEMA_VERSION,))

        # 2. One row per file placed under the target root.
        # (original_hash, original_length) is the dedup key but is NOT unique:
        # a disabled record may be followed by a re-import of the same content.
        conn.execute("""
        CREATE TABLE IF NOT EXISTS imported_files (
            id              INTEGER PRIMARY KEY AUTOINCREMENT,
            subfolder       TEXT NOT NULL,
            file_name       TEXT NOT NULL,
            original_hash   TEXT NOT NULL,
            original_length INTEGER NOT NULL,
            import_enabled  INTEGER NOT NULL DEFAULT 1,
            source_path     TEXT,
            imported_at     TEXT NOT NULL,
            UNIQUE (subfolder, file_name)
        );
        """)

        # 3. Indices for Performance
        conn.execute("CREATE INDEX IF NOT EXISTS idx_imported_key ON imported_files(original_hash, original_length);")

    logging.debug("Database schema initialized.")
