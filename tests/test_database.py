import pytest
from photo_importer import config
from photo_importer.database.db import DBManager
from photo_importer.database.ops import ImportRecordStore
from photo_importer.exceptions import DuplicateRecordError, PersistError, StoreUnavailableError
from photo_importer.models import ImportedRecord

def _record(name="a.jpg", h="hash123", length=1000, subfolder="2021/2021-03", enabled=True):
    return ImportedRecord(
        subfolder=subfolder,
        file_name=name,
        original_hash=h,
        original_length=length,
        import_enabled=enabled,
        source_path=f"/src/{name}",
    )

def test_insert_and_lookup(store):
    rid = store.insert(_record())

    found = store.lookup("hash123", 1000)
    assert found is not None
    assert found.id == rid
    assert found.subfolder == "2021/2021-03"
    assert found.file_name == "a.jpg"
    assert found.import_enabled is True
    assert found.source_path == "/src/a.jpg"
    assert found.imported_at is not None

def test_lookup_needs_hash_and_length(store):
    store.insert(_record())

    assert store.lookup("hash123", 999) is None
    assert store.lookup("other", 1000) is None

def test_duplicate_target_is_distinct_error(store):
    store.insert(_record())

    with pytest.raises(DuplicateRecordError):
        store.insert(_record(h="different"))
    assert store.count() == 1

def test_insert_failure_is_persist_error(conn, store):
    conn.close()

    with pytest.raises(PersistError) as exc:
        store.insert(_record())
    assert not isinstance(exc.value, DuplicateRecordError)

def test_lookup_prefers_first_enabled(store):
    first = store.insert(_record(name="a.jpg"))
    store.insert(_record(name="a_1.jpg"))

    assert store.lookup("hash123", 1000).id == first

def test_lookup_skips_disabled_when_enabled_exists(store):
    old = store.insert(_record(name="a.jpg"))
    store.set_import_enabled(old, False)
    new = store.insert(_record(name="a_1.jpg"))

    assert store.lookup("hash123", 1000).id == new

def test_lookup_all_disabled_returns_latest(store):
    a = store.insert(_record(name="a.jpg", enabled=False))
    b = store.insert(_record(name="a_1.jpg", enabled=False))

    found = store.lookup("hash123", 1000)
    assert found.id == b
    assert found.import_enabled is False
    assert a != b

def test_set_import_enabled(store):
    rid = store.insert(_record())

    assert store.set_import_enabled(rid, False) is True
    assert store.get(rid).import_enabled is False
    assert store.set_import_enabled(rid + 100, False) is False

def test_iter_records_in_insert_order(store):
    store.insert(_record(name="b.jpg", h="h1"))
    store.insert(_record(name="a.jpg", h="h2"))

    assert [r.file_name for r in store.iter_records()] == ["b.jpg", "a.jpg"]
    assert store.count() == 2

def test_open_creates_store_in_target_root(tmp_path):
    target = tmp_path / "library"

    with DBManager(target) as conn:
        ImportRecordStore(conn).insert(_record())

    assert (target / config.STORE_FILENAME).exists()

    # Reopening is idempotent and keeps data
    with DBManager(target) as conn:
        assert ImportRecordStore(conn).count() == 1

def test_open_corrupt_store(tmp_path):
    (tmp_path / config.STORE_FILENAME).write_bytes(b"this is not a sqlite database " * 100)

    with pytest.raises(StoreUnavailableError):
        DBManager(tmp_path).connect()

def test_open_target_root_is_a_file(tmp_path):
    target = tmp_path / "not_a_dir"
    target.write_text("x")

    with pytest.raises(StoreUnavailableError):
        DBManager(target).connect()

def test_unencodable_name_is_persist_error(store):
    # Undecodable bytes in a file name come through as lone surrogates
    with pytest.raises(PersistError):
        store.insert(_record(name="caf\udce9.jpg"))
    assert store.count() == 0
