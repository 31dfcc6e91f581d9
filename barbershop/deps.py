# barbershop/deps.py

from fastapi import Depends, HTTPException
from sqlmodel import Session

from barbershop.booking import BookingService
from barbershop.config import Settings, get_settings
from barbershop.db import get_session
from barbershop.store import SqlAppointmentStore


def require_role(user: dict, *roles: str):
    if user["role"] not in roles:
        raise HTTPException(status_code=403, detail="Forbidden")


def get_booking_service(
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> BookingService:
    return BookingService(SqlAppointmentStore(session), settings)
