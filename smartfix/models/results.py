from typing import List, Optional
from pydantic import BaseModel, Field

from smartfix.core.errors import Recovered
from smartfix.models.booking import Booking, BookingId


class ValidationResult(BaseModel):
    ok: bool
    reason: Optional[str] = None
    message: Optional[str] = None


class BookingLists(BaseModel):
    """Result of loading a user's cached bookings."""
    upcoming: List[Booking] = Field(default_factory=list)
    past: List[Booking] = Field(default_factory=list)
    pruned: int = 0
    recovered: List[Recovered] = Field(default_factory=list)


class CompletionResult(BaseModel):
    booking_id: BookingId
    removed: bool
    remote_deleted: bool
    recovered: List[Recovered] = Field(default_factory=list)
