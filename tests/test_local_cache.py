import json

from smartfix.models.booking import Booking
from smartfix.services.local_cache import (
    FileKeyValueStore,
    LocalBookingCache,
    MemoryKeyValueStore,
    cache_key,
)


def make_booking(**overrides):
    data = {
        "id": 1,
        "user_id": "U1",
        "service": "Plumbing",
        "date": "2999-01-01",
        "time": "09:00",
        "address": "1 Main St",
    }
    data.update(overrides)
    return Booking(**data)


class BrokenStore:
    def get(self, key):
        raise OSError("disk unavailable")

    def set(self, key, value):
        raise OSError("disk full")


def test_cache_key_format():
    assert cache_key("U1") == "bookings_U1"


def test_missing_key_reads_as_empty():
    bookings, recovered = LocalBookingCache(MemoryKeyValueStore()).read("nobody")
    assert bookings == []
    assert recovered is None


def test_corrupt_value_reads_as_empty_and_is_reported():
    store = MemoryKeyValueStore()
    store.set("bookings_U1", "{not json")
    bookings, recovered = LocalBookingCache(store).read("U1")
    assert bookings == []
    assert recovered is not None
    assert recovered.source == "local_cache.read"


def test_wrong_shape_reads_as_empty():
    store = MemoryKeyValueStore()
    store.set("bookings_U1", json.dumps([{"id": 1}]))
    bookings, recovered = LocalBookingCache(store).read("U1")
    assert bookings == []
    assert recovered is not None


def test_store_failures_are_recovered():
    cache = LocalBookingCache(BrokenStore())
    bookings, recovered = cache.read("U1")
    assert bookings == [] and recovered.source == "local_cache.read"

    problem = cache.write("U1", [make_booking()])
    assert problem is not None
    assert problem.source == "local_cache.write"


def test_value_is_json_with_camel_case_keys():
    store = MemoryKeyValueStore()
    LocalBookingCache(store).write("U1", [make_booking(id=7, comments="gate code 1234")])

    stored = json.loads(store.get("bookings_U1"))
    assert stored[0]["id"] == 7
    assert stored[0]["userId"] == "U1"
    assert "createdAt" in stored[0]
    assert stored[0]["status"] == "upcoming"
    assert stored[0]["comments"] == "gate code 1234"


def test_snake_case_values_are_accepted():
    store = MemoryKeyValueStore()
    store.set("bookings_U1", json.dumps([{
        "id": "abc", "user_id": "U1", "service": "Cleaning", "date": "2999-02-02",
        "time": "10:30", "address": "2 High St", "created_at": "2026-10-18T12:00:00Z",
    }]))
    bookings, recovered = LocalBookingCache(store).read("U1")
    assert recovered is None
    assert bookings[0].id == "abc"
    assert bookings[0].comments == ""


def test_file_store_persists_across_instances(tmp_path):
    directory = tmp_path / "cache"
    first = LocalBookingCache(FileKeyValueStore(str(directory)))
    booking = make_booking()
    assert first.write("U1", [booking]) is None

    second = LocalBookingCache(FileKeyValueStore(str(directory)))
    bookings, recovered = second.read("U1")
    assert recovered is None
    assert [b.model_dump() for b in bookings] == [booking.model_dump()]
    assert (directory / "bookings_U1.json").exists()


def test_file_store_missing_file(tmp_path):
    assert FileKeyValueStore(str(tmp_path)).get("bookings_U9") is None


def test_file_store_keeps_keys_inside_directory(tmp_path):
    store = FileKeyValueStore(str(tmp_path))
    store.set("bookings_../../etc", "[]")
    assert store.get("bookings_../../etc") == "[]"
    assert all(p.parent == tmp_path for p in tmp_path.iterdir())


def test_file_store_keeps_lookalike_users_apart(tmp_path):
    cache = LocalBookingCache(FileKeyValueStore(str(tmp_path)))
    cache.write("a@b", [make_booking(user_id="a@b")])

    bookings, recovered = cache.read("a_b")
    assert bookings == []
    assert recovered is None

    cache.write("a_b", [make_booking(id=2, user_id="a_b")])
    assert [b.user_id for b in cache.read("a@b")[0]] == ["a@b"]
    assert [b.user_id for b in cache.read("a_b")[0]] == ["a_b"]
    assert len(list(tmp_path.iterdir())) == 2
