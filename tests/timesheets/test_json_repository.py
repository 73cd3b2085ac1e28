import json

import pytest

from src.timeclock.timeclock.core.enums import Role
from src.timeclock.timeclock.core.exceptions import PersistenceError
from src.timeclock.timeclock.database import json_store
from src.timeclock.timeclock.database.json_store import JsonDocumentStore
from src.timeclock.timeclock.timesheets.json_repository import JsonDayRecordRepository
from src.timeclock.timeclock.timesheets.model import RecordKey
from src.timeclock.timeclock.users.json_repository import JsonUserRepository


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "device" / "timeclock.json"


@pytest.fixture
def repo(store_path):
    store = JsonDocumentStore.open(store_path)
    yield JsonDayRecordRepository(store)
    store.close()


def test_new_records_go_to_the_front(repo):
    repo.upsert_merge(RecordKey("2024-03-01", "Ana", "Acme"), {})
    repo.upsert_merge(RecordKey("2024-03-02", "Ana", "Acme"), {})
    assert [r.date for r in repo.list_all()] == ["2024-03-02", "2024-03-01"]


def test_merge_preserves_sibling_fields(repo):
    key = RecordKey("2024-03-04", "Ana", "Acme")
    repo.upsert_merge(key, {"clock_in": "09:00:00", "notes": "hello"})
    repo.upsert_merge(key, {"clock_out": "17:00:00"})

    record = repo.find(key)
    assert record.clock_in == "09:00:00"
    assert record.clock_out == "17:00:00"
    assert record.notes == "hello"
    assert len(repo.list_all()) == 1


def test_find_missing(repo):
    assert repo.find(RecordKey("2024-03-04", "Nobody", "Acme")) is None


def test_query_range_filters_and_orders(repo):
    for date, person, org in [
        ("2024-03-01", "Ana", "Acme"),
        ("2024-03-03", "ana maria", "ACME corp"),
        ("2024-03-02", "Bob", "Acme"),
        ("2024-03-09", "Ana", "Acme"),
    ]:
        repo.upsert_merge(RecordKey(date, person, org), {})

    rows = repo.query_range(start="2024-03-01", end="2024-03-07", person="ANA", organization="acme")
    assert [(r.date, r.person) for r in rows] == [("2024-03-03", "ana maria"), ("2024-03-01", "Ana")]

    everyone = repo.query_range(start="2024-03-01", end="2024-03-07", person="  ")
    assert len(everyone) == 3


def test_records_survive_reopen(store_path):
    key = RecordKey("2024-03-04", "Ana", "Acme")
    with JsonDocumentStore.open(store_path) as store:
        JsonDayRecordRepository(store).upsert_merge(key, {"clock_in": "09:00:00"})

    raw = json.loads(store_path.read_text(encoding="utf-8"))
    assert raw["day_records"][0]["clockIn"] == "09:00:00"

    with JsonDocumentStore.open(store_path) as store:
        assert JsonDayRecordRepository(store).find(key).clock_in == "09:00:00"


def test_wipe_all(repo):
    repo.upsert_merge(RecordKey("2024-03-04", "Ana", "Acme"), {})
    repo.wipe_all()
    assert repo.list_all() == []


def test_closed_store_refuses_access(store_path):
    store = JsonDocumentStore.open(store_path)
    store.close()
    with pytest.raises(PersistenceError):
        JsonDayRecordRepository(store).find(RecordKey("2024-03-04", "Ana", "Acme"))


def test_corrupt_file_is_a_persistence_error(store_path):
    store_path.parent.mkdir(parents=True)
    store_path.write_text("{not json", encoding="utf-8")
    with pytest.raises(PersistenceError):
        JsonDocumentStore.open(store_path)


def test_role_change_from_second_store_survives_app_writes(store_path):
    app_store = JsonDocumentStore.open(store_path)
    script_store = JsonDocumentStore.open(store_path)

    uid = JsonUserRepository(app_store).create_user(
        name="Mia", company="Acme", email="mia@example.com", password_hash="x", role=Role.EMPLOYEE
    )
    assert JsonUserRepository(script_store).set_role(uid, Role.MANAGER)
    script_store.close()

    # the running app sees the change without reopening
    assert JsonUserRepository(app_store).get_by_id(uid).role == Role.MANAGER

    JsonDayRecordRepository(app_store).upsert_merge(RecordKey("2024-03-04", "Ana", "Acme"), {"clock_in": "09:00:00"})
    app_store.close()

    with JsonDocumentStore.open(store_path) as store:
        assert JsonUserRepository(store).get_by_id(uid).role == Role.MANAGER
        assert JsonDayRecordRepository(store).find(RecordKey("2024-03-04", "Ana", "Acme")).clock_in == "09:00:00"


def test_stamps_from_two_stores_are_both_kept(store_path):
    key = RecordKey("2024-03-04", "Ana", "Acme")
    first = JsonDayRecordRepository(JsonDocumentStore.open(store_path))
    second = JsonDayRecordRepository(JsonDocumentStore.open(store_path))

    first.upsert_merge(key, {"clock_in": "09:00:00"})
    second.upsert_merge(key, {"lunch_out": "12:00:00"})
    first.upsert_merge(key, {"clock_out": "17:00:00"})

    record = second.find(key)
    assert (record.clock_in, record.lunch_out, record.clock_out) == ("09:00:00", "12:00:00", "17:00:00")


def test_close_does_not_write(store_path):
    store = JsonDocumentStore.open(store_path)
    store.close()
    assert not store_path.exists()


def test_failed_save_leaves_no_temp_file(store_path, monkeypatch):
    store = JsonDocumentStore.open(store_path)
    repo = JsonDayRecordRepository(store)
    repo.upsert_merge(RecordKey("2024-03-01", "Ana", "Acme"), {})

    def broken_dump(*args, **kwargs):
        raise TypeError("not serializable")

    monkeypatch.setattr(json_store.json, "dump", broken_dump)
    with pytest.raises(PersistenceError):
        repo.upsert_merge(RecordKey("2024-03-02", "Ana", "Acme"), {})
    monkeypatch.undo()

    assert [p.name for p in store_path.parent.iterdir()] == [store_path.name]
    assert [r.date for r in repo.list_all()] == ["2024-03-01"]
    store.close()
