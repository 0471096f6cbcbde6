import pytest
import sqlite3
from datetime import datetime
from photo_importer.database.schema import init_schema
from photo_importer.database.ops import ImportRecordStore
from photo_importer.metadata.extract import MetadataExtractor

CAPTURE_DT = datetime(2021, 3, 14, 15, 9, 26)
SUBFOLDER = "2021/2021-03"

@pytest.fixture
def conn():
    """Returns an in-memory SQLite connection with the schema initialized."""
    c = sqlite3.connect(":memory:")
    init_schema(c)
    try:
        yield c
    finally:
        c.close()

@pytest.fixture
def store(conn):
    """Returns an ImportRecordStore attached to the in-memory DB."""
    return ImportRecordStore(conn)

@pytest.fixture
def fixed_capture_date(monkeypatch):
    """Every file reports the same capture date, so placement is predictable."""
    monkeypatch.setattr(MetadataExtractor, "get_capture_datetime", lambda self, path: CAPTURE_DT)
    return CAPTURE_DT
