import pytest

from wafersite.registry.store import (
    Filter,
    FilterOp,
    ListOptions,
    MemoryDatabase,
    MemoryStorage,
    RecordNotFound,
    SortField,
)


@pytest.fixture
def db():
    database = MemoryDatabase()
    for name, size in [("alpha", 3), ("beta", 1), ("gamma", 2), ("alphabet", 5)]:
        database.create("pkgs", {"name": name, "size": size})
    return database


def test_create_then_get_round_trip():
    database = MemoryDatabase()
    created = database.create("orgs", {"name": "wafer", "is_reserved": True})
    fetched = database.get("orgs", created.id)
    assert fetched.id == created.id
    assert fetched.data["name"] == "wafer"
    assert fetched.data["is_reserved"] is True
    assert "created_at" in fetched.data


def test_created_ids_are_unique(db):
    ids = [r.id for r in db.list_all("pkgs")]
    assert len(set(ids)) == len(ids) == 4


def test_get_missing_raises(db):
    with pytest.raises(RecordNotFound):
        db.get("pkgs", "nope")
    with pytest.raises(RecordNotFound):
        db.get("unknown", "nope")


def test_get_by_field(db):
    assert db.get_by_field("pkgs", "name", "gamma").data["size"] == 2
    with pytest.raises(RecordNotFound):
        db.get_by_field("pkgs", "name", "delta")


def test_list_all_equal_filter(db):
    rows = db.list_all("pkgs", [Filter("size", FilterOp.EQUAL, 1)])
    assert [r.data["name"] for r in rows] == ["beta"]


def test_like_filter_is_substring_and_case_sensitive(db):
    hits = db.list_all("pkgs", [Filter("name", FilterOp.LIKE, "%lph%")])
    assert sorted(r.data["name"] for r in hits) == ["alpha", "alphabet"]
    assert db.count("pkgs", [Filter("name", FilterOp.LIKE, "%LPH%")]) == 0


def test_like_underscore_matches_single_char(db):
    hits = db.list_all("pkgs", [Filter("name", FilterOp.LIKE, "bet_")])
    assert [r.data["name"] for r in hits] == ["beta"]


def test_comparison_and_null_filters(db):
    assert db.count("pkgs", [Filter("size", FilterOp.GREATER_THAN, 2)]) == 2
    assert db.count("pkgs", [Filter("size", FilterOp.LESS_EQUAL, 2)]) == 2
    assert db.count("pkgs", [Filter("summary", FilterOp.IS_NULL)]) == 4
    assert db.count("pkgs", [Filter("name", FilterOp.IN, ["beta", "gamma"])]) == 2


def test_filter_on_id(db):
    target = db.get_by_field("pkgs", "name", "beta")
    rows = db.list_all("pkgs", [Filter("id", FilterOp.EQUAL, target.id)])
    assert [r.id for r in rows] == [target.id]


def test_list_sorts_and_pages(db):
    opts = ListOptions(sort=[SortField("size", desc=True)], limit=2, offset=1)
    result = db.list("pkgs", opts)
    assert result.total_count == 4
    assert [r.data["name"] for r in result.records] == ["alpha", "gamma"]


def test_list_created_at_desc_reverses_insertion(db):
    everything = db.list_all("pkgs")
    newest_first = db.list("pkgs", ListOptions(sort=[SortField("created_at", desc=True)]))
    assert [r.id for r in newest_first.records] == [r.id for r in reversed(everything)]


def test_count_matches_list_total(db):
    filters = [Filter("name", FilterOp.LIKE, "%a%")]
    assert db.count("pkgs", filters) == db.list("pkgs", ListOptions(filters=filters)).total_count


def test_update_merges_fields(db):
    row = db.get_by_field("pkgs", "name", "beta")
    updated = db.update("pkgs", row.id, {"size": 9, "summary": None})
    assert updated.data["name"] == "beta"
    assert updated.data["size"] == 9
    assert "summary" in db.get("pkgs", row.id).data


def test_update_missing_raises(db):
    with pytest.raises(RecordNotFound):
        db.update("pkgs", "missing", {"size": 0})


def test_returned_records_are_copies(db):
    row = db.get_by_field("pkgs", "name", "alpha")
    row.data["size"] = 100
    assert db.get("pkgs", row.id).data["size"] == 3


def test_storage_put_get_round_trip():
    storage = MemoryStorage()
    storage.put("registry", "wafer-run/demo/1.0.0.wafer", b"\x00\x01payload")
    assert storage.get("registry", "wafer-run/demo/1.0.0.wafer") == b"\x00\x01payload"
    assert storage.folders == ["registry"]


def test_storage_get_missing_raises():
    storage = MemoryStorage()
    with pytest.raises(RecordNotFound):
        storage.get("registry", "absent")


def test_create_folder_is_idempotent():
    storage = MemoryStorage()
    storage.create_folder("registry", False)
    storage.put("registry", "k", b"v")
    storage.create_folder("registry", True)
    assert storage.get("registry", "k") == b"v"
    assert storage.public["registry"] is False