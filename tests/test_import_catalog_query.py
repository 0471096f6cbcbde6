import hashlib
import pytest
from pathlib import Path

# Import the query tool being tested
import import_catalog_query as icq

from photo_importer import config
from photo_importer.database.db import DBManager
from photo_importer.database.ops import ImportRecordStore
from photo_importer.models import ImportedRecord


@pytest.fixture
def db_path(tmp_path):
    """A file-backed store with two records."""
    with DBManager(tmp_path) as conn:
        store = ImportRecordStore(conn)
        for name, data in (("a.jpg", b"aaa"), ("b.jpg", b"bbb")):
            store.insert(ImportedRecord(
                subfolder="2021/2021-03",
                file_name=name,
                original_hash=hashlib.sha256(data).hexdigest(),
                original_length=len(data),
            ))
    return tmp_path / config.STORE_FILENAME


def test_connect_db_missing(tmp_path):
    with pytest.raises(SystemExit):
        icq.connect_db(tmp_path / "none.db")


def test_list_records(db_path, capsys):
    icq.main(["--db", str(db_path), "--list"])

    out = capsys.readouterr().out
    assert "2021/2021-03/a.jpg" in out
    assert "2021/2021-03/b.jpg" in out


def test_disable_and_enable(db_path, capsys):
    icq.main(["--db", str(db_path), "--disable", "1"])
    assert "Record 1 disabled" in capsys.readouterr().out

    icq.main(["--db", str(db_path), "--disabled"])
    out = capsys.readouterr().out
    assert "a.jpg" in out
    assert "b.jpg" not in out

    icq.main(["--db", str(db_path), "--enable", "1"])
    capsys.readouterr()
    icq.main(["--db", str(db_path), "--disabled"])
    assert "No records found." in capsys.readouterr().out


def test_disable_unknown_id(db_path, capsys):
    icq.main(["--db", str(db_path), "--disable", "42"])
    assert "No record with id=42" in capsys.readouterr().out


def test_find_by_hash(db_path, capsys):
    prefix = hashlib.sha256(b"bbb").hexdigest()[:8]
    icq.main(["--db", str(db_path), "--hash", prefix.upper()])

    out = capsys.readouterr().out
    assert "b.jpg" in out
    assert "a.jpg" not in out
