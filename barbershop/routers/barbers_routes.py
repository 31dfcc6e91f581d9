# barbershop/routers/barbers_routes.py

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from barbershop.auth import get_current_user
from barbershop.booking import BookingService
from barbershop.db import get_session
from barbershop.deps import get_booking_service, require_role
from barbershop.models import Barber
from barbershop.schemas import AvailabilityResponse, BarberCreate, BarberPublic, BarberUpdate, UserRole
from barbershop.slots import format_slot

router = APIRouter(
    prefix="/barbers",
    tags=["barbers"],
)


@router.get("", response_model=List[BarberPublic])
def list_barbers(booking: BookingService = Depends(get_booking_service)):
    return booking.store.list_active_barbers()


@router.post("", response_model=BarberPublic, status_code=201)
def create_barber(
    barber: BarberCreate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, UserRole.admin.value)

    db_barber = Barber(name=barber.name, photo=barber.photo, active=barber.active)
    session.add(db_barber)
    session.commit()
    session.refresh(db_barber)
    return db_barber


@router.patch("/{barber_id}", response_model=BarberPublic)
def update_barber(
    barber_id: int,
    changes: BarberUpdate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, UserRole.admin.value)

    db_barber = session.get(Barber, barber_id)
    if db_barber is None:
        raise HTTPException(status_code=404, detail="Barber not found")

    # Deactivating keeps the row so past appointments still resolve
    for field, value in changes.model_dump(exclude_unset=True).items():
        if value is None and field != "photo":
            continue
        setattr(db_barber, field, value)

    session.add(db_barber)
    session.commit()
    session.refresh(db_barber)
    return db_barber


@router.get("/{barber_id}/availability", response_model=AvailabilityResponse)
def barber_availability(
    barber_id: int,
    date: date,
    booking: BookingService = Depends(get_booking_service),
):
    barber = booking.store.get_barber(barber_id)
    if barber is None or not barber.active:
        raise HTTPException(status_code=404, detail="Barber not found")

    if not booking.is_bookable_date(date):
        return {"barber_id": barber_id, "date": date, "open": False, "available_starts": []}

    slots = booking.list_available_slots(barber_id, date)
    return {
        "barber_id": barber_id,
        "date": date,
        "open": True,
        "available_starts": [format_slot(s) for s in slots],
    }
