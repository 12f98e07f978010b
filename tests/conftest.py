import pytest
from datetime import datetime, timezone
from typing import List

from smartfix.core.errors import RemoteStoreError
from smartfix.models.booking import BookingRecord, RemoteBooking
from smartfix.services.booking_service import BookingSynchronizer
from smartfix.services.local_cache import LocalBookingCache, MemoryKeyValueStore

FIXED_NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


class FakeRemoteStore:
    """In-memory stand-in for the Supabase bookings table."""

    def __init__(self, fail_insert=False, fail_delete=False, echo_id=True):
        self.rows: List[dict] = []
        self.deleted = []
        self.fail_insert = fail_insert
        self.fail_delete = fail_delete
        self.echo_id = echo_id
        self._next_id = 100

    async def insert(self, record: BookingRecord) -> dict:
        if self.fail_insert:
            raise RemoteStoreError("new row violates row-level security policy")
        payload = record.to_insert_payload()
        if not self.echo_id:
            return payload
        self._next_id += 1
        row = {"id": self._next_id, **payload}
        self.rows.append(row)
        return row

    async def query(self, user_id: str) -> List[RemoteBooking]:
        rows = sorted((r for r in self.rows if r["user_id"] == user_id), key=lambda r: r["date"])
        return [RemoteBooking.model_validate(r) for r in rows]

    async def delete(self, booking_id) -> None:
        self.deleted.append(booking_id)
        if self.fail_delete:
            raise RemoteStoreError("network request failed")
        self.rows = [r for r in self.rows if str(r["id"]) != str(booking_id)]


class Clock:
    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def remote():
    return FakeRemoteStore()


@pytest.fixture
def kv_store():
    return MemoryKeyValueStore()


@pytest.fixture
def cache(kv_store):
    return LocalBookingCache(kv_store)


@pytest.fixture
def synchronizer(remote, cache, clock):
    return BookingSynchronizer(remote, cache, clock=clock)
