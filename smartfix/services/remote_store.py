from typing import List, Optional

from supabase import AsyncClient

from smartfix.core.config import settings
from smartfix.core.errors import RemoteStoreError
from smartfix.core.logger import logger
from smartfix.models.booking import BookingId, BookingRecord, RemoteBooking


def _error_message(e: Exception) -> str:
    # postgrest APIError carries the backend message separately
    return getattr(e, "message", None) or str(e)


class SupabaseBookingStore:
    """
    Remote bookings table. The client is handed in once at start-up;
    a missing client means the backend is not configured.
    """

    def __init__(self, client: Optional[AsyncClient], table: str = None):
        self.client = client
        self.table = table or settings.BOOKINGS_TABLE

    def _require_client(self) -> AsyncClient:
        if not self.client:
            raise RemoteStoreError("Booking backend is not configured")
        return self.client

    async def insert(self, record: BookingRecord) -> dict:
        """
        Inserts a booking row and returns it as stored (with its id when the
        backend echoes it back, otherwise the payload that was sent).
        """
        client = self._require_client()
        payload = record.to_insert_payload()
        try:
            response = await client.table(self.table).insert(payload).execute()
        except Exception as e:
            logger.error(f"❌ DB Error (insert booking): {e}")
            raise RemoteStoreError(_error_message(e)) from e

        if response.data:
            row = response.data[0]
            logger.info(f"✅ Booking stored remotely (ID {row.get('id')}) for user {record.user_id}")
            return row

        logger.warning("⚠️ Insert returned no row, remote id unknown")
        return payload

    async def query(self, user_id: str) -> List[RemoteBooking]:
        client = self._require_client()
        try:
            response = await client.table(self.table)\
                .select("*")\
                .eq("user_id", user_id)\
                .order("date", desc=False)\
                .execute()
            return [RemoteBooking.model_validate(row) for row in response.data or []]
        except Exception as e:
            logger.error(f"❌ DB Error (query bookings): {e}")
            raise RemoteStoreError(_error_message(e)) from e

    async def delete(self, booking_id: BookingId) -> None:
        client = self._require_client()
        try:
            await client.table(self.table).delete().eq("id", booking_id).execute()
            logger.info(f"🗑️ Booking {booking_id} deleted from DB.")
        except Exception as e:
            raise RemoteStoreError(_error_message(e)) from e
