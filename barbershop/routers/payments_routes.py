# barbershop/routers/payments_routes.py

import calendar
import logging
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from barbershop.auth import get_current_user
from barbershop.db import get_session
from barbershop.deps import require_role
from barbershop.models import Appointment, CustomerProfile, Payment, Service
from barbershop.schemas import (
    STAFF_ROLES,
    AppointmentStatus,
    FinancialSummary,
    PaymentCreate,
    PaymentListItem,
    PaymentPublic,
    SummaryPeriod,
    UserRole,
)
from barbershop.store import SqlAppointmentStore

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["payments"],
)


def period_bounds(period: SummaryPeriod, today: date):
    if period == SummaryPeriod.month:
        last_day = calendar.monthrange(today.year, today.month)[1]
        return date(today.year, today.month, 1), date(today.year, today.month, last_day)
    return date(today.year, 1, 1), date(today.year, 12, 31)


def in_period(stmt, start: date, end: date):
    return (
        stmt.where(Payment.paid_at >= datetime.combine(start, time.min))
        .where(Payment.paid_at < datetime.combine(end + timedelta(days=1), time.min))
    )


@router.post("/appointments/{appt_id}/payments", response_model=PaymentPublic, status_code=201)
def record_payment(
    appt_id: int,
    payment: PaymentCreate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, *STAFF_ROLES)
    store = SqlAppointmentStore(session)

    appointment = store.get_appointment(appt_id)
    if appointment is None:
        raise HTTPException(status_code=404, detail="Appointment not found")
    if appointment.status != AppointmentStatus.completed.value:
        raise HTTPException(status_code=409, detail="Payments are recorded after the service is completed")

    amount = payment.amount
    if amount is None:
        service = store.get_service(appointment.service_id)
        if service is None:
            raise HTTPException(status_code=422, detail="Service no longer exists, an explicit amount is required")
        amount = service.price

    db_payment = Payment(
        appointment_id=appointment.id,
        amount=amount,
        method=payment.method.value,
    )
    session.add(db_payment)
    # commits the payment together with the paid flag
    store.mark_paid(appointment)
    session.refresh(db_payment)

    logger.info("payment %s recorded for appointment %s: %s via %s", db_payment.id, appt_id, amount, db_payment.method)
    return db_payment


@router.get("/payments", response_model=List[PaymentListItem])
def list_payments(
    period: SummaryPeriod = SummaryPeriod.month,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, *STAFF_ROLES)

    start, end = period_bounds(period, date.today())
    stmt = (
        select(Payment, Appointment, CustomerProfile, Service)
        .join(Appointment, Payment.appointment_id == Appointment.id)
        .join(CustomerProfile, Appointment.customer_id == CustomerProfile.id, isouter=True)
        .join(Service, Appointment.service_id == Service.id, isouter=True)
    )
    rows = session.exec(in_period(stmt, start, end).order_by(Payment.paid_at.desc(), Payment.id.desc())).all()

    return [
        {
            "id": p.id,
            "appointment_id": a.id,
            "date": a.date,
            "customer_name": profile.name if profile else None,
            "service_name": service.name if service else None,
            "amount": p.amount,
            "method": p.method,
            "paid_at": p.paid_at,
        }
        for p, a, profile, service in rows
    ]


@router.get("/payments/summary", response_model=FinancialSummary)
def financial_summary(
    period: SummaryPeriod = SummaryPeriod.month,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, UserRole.admin.value)

    start, end = period_bounds(period, date.today())
    payments = session.exec(in_period(select(Payment), start, end)).all()

    total = sum((Decimal(p.amount) for p in payments), Decimal("0"))
    count = len(payments)
    average = (total / count).quantize(Decimal("0.01")) if count else Decimal("0.00")

    return {
        "period": period,
        "start": start,
        "end": end,
        "total_revenue": total,
        "transactions": count,
        "average_ticket": average,
    }
