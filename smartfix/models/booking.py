from typing import List, Optional, Union
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

BookingId = Union[int, str]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Booking(BaseModel):
    """
    A booking as mirrored in the local cache.
    Serialized with camelCase keys (userId, createdAt); snake_case is accepted on read.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: BookingId
    user_id: str = Field(alias="userId")
    service: str
    date: str  # YYYY-MM-DD, stored as entered
    time: str  # HH:MM, stored as entered
    address: str
    comments: str = ""
    status: str = "upcoming"
    created_at: datetime = Field(default_factory=_utcnow, alias="createdAt")

    def display_status(self, today: str) -> str:
        return "Upcoming" if self.date >= today else "Completed"


class BookingRecord(BaseModel):
    """Row written to the remote bookings table."""
    user_id: str
    service: str
    date: str
    time: str
    address: str
    comments: str = ""
    status: str = "pending"
    created_at: datetime = Field(default_factory=_utcnow)

    def to_insert_payload(self) -> dict:
        return self.model_dump(mode="json")


class RemoteBooking(BaseModel):
    """Row read back from the remote bookings table."""
    id: BookingId
    user_id: str
    service: str
    date: str
    time: str
    address: str
    comments: Optional[str] = None
    status: Optional[str] = None
    created_at: Optional[datetime] = None


# Local cache value: JSON array of bookings
BookingList = TypeAdapter(List[Booking])


def dump_bookings(bookings: List[Booking]) -> str:
    return BookingList.dump_json(bookings, by_alias=True).decode("utf-8")


def parse_bookings(raw: str) -> List[Booking]:
    return BookingList.validate_json(raw)
