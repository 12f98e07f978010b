from typing import Callable, List
from datetime import datetime, timezone

from smartfix.core.errors import Recovered
from smartfix.core.logger import logger
from smartfix.models.booking import Booking, BookingId, BookingRecord, RemoteBooking
from smartfix.models.results import BookingLists, CompletionResult
from smartfix.services.local_cache import LocalBookingCache
from smartfix.services.remote_store import SupabaseBookingStore


def get_upcoming_bookings(bookings: List[Booking], today: str) -> List[Booking]:
    return [b for b in bookings if b.date >= today]


def get_past_bookings(bookings: List[Booking], today: str) -> List[Booking]:
    return [b for b in bookings if b.date < today]


def fallback_booking_id(now: datetime, taken: List[BookingId]) -> int:
    """Epoch milliseconds, bumped until it does not clash with a cached id."""
    candidate = int(now.timestamp() * 1000)
    taken_keys = {str(t) for t in taken}
    while str(candidate) in taken_keys:
        candidate += 1
    return candidate


class BookingSynchronizer:
    """
    Keeps a user's bookings in the remote store and mirrors them into the local cache.

    The remote insert must succeed before anything is cached. The local cache is what
    "my bookings" shows; it is pruned of past-dated entries on every load. Completing a
    booking removes it locally and deletes it remotely on a best-effort basis.
    """

    def __init__(self, remote: SupabaseBookingStore, cache: LocalBookingCache, clock: Callable[[], datetime] = None):
        self.remote = remote
        self.cache = cache
        self.clock = clock or (lambda: datetime.now().astimezone())

    def today(self) -> str:
        return self.clock().date().isoformat()

    async def create(self, user_id: str, service_name: str, date: str, time: str, address: str, comments: str = "") -> Booking:
        """
        Creates a booking for pre-validated input.
        Raises RemoteStoreError if the remote insert fails; nothing is cached then.
        """
        now = self.clock()
        record = BookingRecord(
            user_id=user_id,
            service=service_name,
            date=date,
            time=time,
            address=address,
            comments=comments or "",
            status="pending",
            created_at=now.astimezone(timezone.utc),
        )

        logger.info(f"📥 Booking Request - User: {user_id}, Service: {service_name}, Day: {date}, Time: {time}")
        row = await self.remote.insert(record)

        bookings, read_problem = self.cache.read(user_id)
        if read_problem:
            logger.warning(f"⚠️ Cache for user {user_id} was unreadable ({read_problem.detail}), starting a fresh list")
        remote_id = row.get("id") if row else None
        booking_id = remote_id if remote_id is not None else fallback_booking_id(now, [b.id for b in bookings])
        if remote_id is None:
            logger.warning(f"⚠️ No remote id returned, using local id {booking_id}")

        booking = Booking(
            id=booking_id,
            user_id=user_id,
            service=service_name,
            date=date,
            time=time,
            address=address,
            comments=comments or "",
            status="upcoming",
            created_at=record.created_at,
        )
        bookings.append(booking)
        self.cache.write(user_id, bookings)

        logger.info(f"✅ Booking {booking.id} cached for user {user_id}")
        return booking

    async def load(self, user_id: str) -> BookingLists:
        """Reads the cached bookings, drops the past-dated ones and writes the rest back."""
        today = self.today()
        recovered: List[Recovered] = []

        bookings, read_problem = self.cache.read(user_id)
        if read_problem:
            recovered.append(read_problem)

        kept = [b for b in bookings if b.date >= today]
        pruned = len(bookings) - len(kept)
        if pruned:
            logger.info(f"🧹 Pruned {pruned} past booking(s) for user {user_id}")

        write_problem = self.cache.write(user_id, kept)
        if write_problem:
            recovered.append(write_problem)

        # past is empty once pruned; both lists are still computed the same way
        return BookingLists(
            upcoming=get_upcoming_bookings(kept, today),
            past=get_past_bookings(kept, today),
            pruned=pruned,
            recovered=recovered,
        )

    async def complete(self, user_id: str, booking_id: BookingId) -> CompletionResult:
        """
        Marks a booking done: it is removed from the local cache, and a remote delete
        is fired whose failure is recorded but never undoes the local removal.
        """
        recovered: List[Recovered] = []

        bookings, read_problem = self.cache.read(user_id)
        if read_problem:
            recovered.append(read_problem)

        remaining = [b for b in bookings if str(b.id) != str(booking_id)]
        removed = len(remaining) != len(bookings)

        write_problem = self.cache.write(user_id, remaining)
        if write_problem:
            recovered.append(write_problem)

        remote_deleted = False
        try:
            await self.remote.delete(booking_id)
            remote_deleted = True
        except Exception as e:
            logger.warning(f"⚠️ Remote delete of booking {booking_id} failed, local removal kept: {e}")
            recovered.append(Recovered(source="remote.delete", detail=str(e)))

        logger.info(f"🏁 Booking {booking_id} completed for user {user_id} (local removed={removed}, remote deleted={remote_deleted})")
        return CompletionResult(
            booking_id=booking_id,
            removed=removed,
            remote_deleted=remote_deleted,
            recovered=recovered,
        )

    async def list_remote(self, user_id: str) -> List[RemoteBooking]:
        """Remote rows for the user ordered by date. Raises RemoteStoreError on failure."""
        return await self.remote.query(user_id)

