# barbershop/routers/appointments_routes.py

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from barbershop.auth import get_current_user
from barbershop.booking import BookingService, is_staff
from barbershop.db import get_session
from barbershop.deps import get_booking_service, require_role
from barbershop.models import Appointment
from barbershop.schemas import (
    STAFF_ROLES,
    AppointmentCreate,
    AppointmentPublic,
    AppointmentStatus,
)

router = APIRouter(
    prefix="/appointments",
    tags=["appointments"],
)


@router.post("", response_model=AppointmentPublic, status_code=201)
def create_appointment(
    appt: AppointmentCreate,
    booking: BookingService = Depends(get_booking_service),
    current_user: dict = Depends(get_current_user),
):
    if is_staff(current_user["role"]):
        customer_id = appt.customer_id or current_user["profile_id"]
    else:
        customer_id = current_user["profile_id"]

    if customer_id is None:
        raise HTTPException(status_code=422, detail="A customer profile is required to book")

    return booking.create_appointment(
        customer_id=customer_id,
        barber_id=appt.barber_id,
        service_id=appt.service_id,
        day=appt.date,
        start_time=appt.start_time,
        notes=appt.notes,
    )


@router.post("/{appt_id}/cancel", response_model=AppointmentPublic)
def cancel_appointment(
    appt_id: int,
    booking: BookingService = Depends(get_booking_service),
    current_user: dict = Depends(get_current_user),
):
    return booking.cancel_appointment(appt_id, current_user["profile_id"], current_user["role"])


@router.post("/{appt_id}/confirm", response_model=AppointmentPublic)
def confirm_appointment(
    appt_id: int,
    booking: BookingService = Depends(get_booking_service),
    current_user: dict = Depends(get_current_user),
):
    return booking.confirm_appointment(appt_id, current_user["role"])


@router.post("/{appt_id}/complete", response_model=AppointmentPublic)
def complete_appointment(
    appt_id: int,
    booking: BookingService = Depends(get_booking_service),
    current_user: dict = Depends(get_current_user),
):
    return booking.complete_appointment(appt_id, current_user["role"])


@router.get("/me", response_model=List[AppointmentPublic])
def list_my_appointments(
    status: Optional[AppointmentStatus] = None,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    if current_user["profile_id"] is None:
        return []

    stmt = select(Appointment).where(Appointment.customer_id == current_user["profile_id"])
    if status is not None:
        stmt = stmt.where(Appointment.status == status.value)

    stmt = stmt.order_by(Appointment.date, Appointment.start_time)
    return session.exec(stmt).all()


@router.get("", response_model=List[AppointmentPublic])
def list_appointments(
    on_date: Optional[date] = None,
    barber_id: Optional[int] = None,
    status: Optional[AppointmentStatus] = None,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, *STAFF_ROLES)

    stmt = select(Appointment)
    if on_date is not None:
        stmt = stmt.where(Appointment.date == on_date)
    if barber_id is not None:
        stmt = stmt.where(Appointment.barber_id == barber_id)
    if status is not None:
        stmt = stmt.where(Appointment.status == status.value)

    stmt = stmt.order_by(Appointment.date.desc(), Appointment.start_time)
    return session.exec(stmt).all()
