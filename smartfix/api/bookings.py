from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from smartfix.core.errors import ValidationError
from smartfix.core.security import require_user_id
from smartfix.models.booking import Booking
from smartfix.services.container import Container, get_container
from smartfix.services.validation import validate_booking_form

router = APIRouter(prefix="/bookings")


class CreateBookingRequest(BaseModel):
    service: str
    date: str
    time: str
    address: str
    comments: Optional[str] = ""


def _present(booking: Booking, today: str) -> dict:
    data = booking.model_dump(mode="json", by_alias=True)
    data["display_status"] = booking.display_status(today)
    return data


@router.post("", status_code=201)
async def create_booking(
    req: CreateBookingRequest,
    container: Container = Depends(get_container),
    user_id: str = Depends(require_user_id),
):
    check = validate_booking_form(req.date, req.time, req.address)
    if not check.ok:
        raise ValidationError(check.reason, check.message)

    # RemoteStoreError propagates and is reported as 502
    booking = await container.bookings.create(
        user_id, req.service, req.date, req.time, req.address, req.comments or ""
    )

    return {
        "booking": booking.model_dump(mode="json", by_alias=True),
        "message": "Booking submitted successfully! You will receive a confirmation shortly.",
    }


@router.get("")
async def load_bookings(
    container: Container = Depends(get_container),
    user_id: str = Depends(require_user_id),
):
    lists = await container.bookings.load(user_id)
    today = container.bookings.today()
    return {
        "upcoming": [_present(b, today) for b in lists.upcoming],
        "past": [_present(b, today) for b in lists.past],
        "pruned": lists.pruned,
    }


@router.get("/remote")
async def list_remote_bookings(
    container: Container = Depends(get_container),
    user_id: str = Depends(require_user_id),
):
    rows = await container.bookings.list_remote(user_id)
    return {"bookings": [row.model_dump(mode="json") for row in rows]}


@router.post("/{booking_id}/complete")
async def complete_booking(
    booking_id: str,
    container: Container = Depends(get_container),
    user_id: str = Depends(require_user_id),
):
    result = await container.bookings.complete(user_id, booking_id)
    return {
        "booking_id": str(result.booking_id),
        "removed": result.removed,
        "remote_deleted": result.remote_deleted,
    }
