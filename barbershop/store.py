# barbershop/store.py

import logging
from contextlib import contextmanager
from datetime import date as Date
from typing import List, Optional, Protocol

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlmodel import Session, select

from barbershop.errors import SlotConflictError, StoreUnavailableError
from barbershop.models import Appointment, Barber, CustomerProfile, Service
from barbershop.schemas import AppointmentStatus
from barbershop.slots import Interval

logger = logging.getLogger(__name__)


class AppointmentStore(Protocol):
    """What the booking core needs from persistence."""

    def occupied_intervals(self, barber_id: int, day: Date) -> List[Interval]: ...

    def insert_appointment(self, appointment: Appointment) -> Appointment: ...

    def get_appointment(self, appointment_id: int) -> Optional[Appointment]: ...

    def set_status(self, appointment: Appointment, status: AppointmentStatus) -> Appointment: ...

    def mark_paid(self, appointment: Appointment) -> Appointment: ...

    def get_service(self, service_id: int) -> Optional[Service]: ...

    def get_barber(self, barber_id: int) -> Optional[Barber]: ...

    def get_profile(self, profile_id: int) -> Optional[CustomerProfile]: ...

    def get_profile_for_user(self, user_id: int) -> Optional[CustomerProfile]: ...

    def list_active_services(self) -> List[Service]: ...

    def list_active_barbers(self) -> List[Barber]: ...


class SqlAppointmentStore:
    def __init__(self, session: Session):
        self.session = session

    @contextmanager
    def _guard(self, action: str):
        try:
            yield
        except OperationalError as exc:
            self.session.rollback()
            logger.error("store unavailable during %s: %s", action, exc)
            raise StoreUnavailableError("Data store unavailable, try again") from exc

    def occupied_intervals(self, barber_id: int, day: Date) -> List[Interval]:
        with self._guard("occupied_intervals"):
            rows = self.session.exec(
                select(Appointment.start_time, Appointment.end_time)
                .where(Appointment.barber_id == barber_id)
                .where(Appointment.date == day)
                .where(Appointment.status != AppointmentStatus.cancelled.value)
                .order_by(Appointment.start_time)
            ).all()
        return [(start, end) for start, end in rows]

    def insert_appointment(self, appointment: Appointment) -> Appointment:
        with self._guard("insert_appointment"):
            self.session.add(appointment)
            try:
                self.session.commit()
            except IntegrityError as exc:
                self.session.rollback()
                raise SlotConflictError("Slot no longer available, please pick another slot") from exc
            self.session.refresh(appointment)  # fills appointment.id
        return appointment

    def get_appointment(self, appointment_id: int) -> Optional[Appointment]:
        with self._guard("get_appointment"):
            return self.session.get(Appointment, appointment_id)

    def set_status(self, appointment: Appointment, status: AppointmentStatus) -> Appointment:
        with self._guard("set_status"):
            appointment.status = status.value
            self.session.add(appointment)
            self.session.commit()
            self.session.refresh(appointment)
        return appointment

    def mark_paid(self, appointment: Appointment) -> Appointment:
        with self._guard("mark_paid"):
            appointment.paid = True
            self.session.add(appointment)
            self.session.commit()
            self.session.refresh(appointment)
        return appointment

    def get_service(self, service_id: int) -> Optional[Service]:
        with self._guard("get_service"):
            return self.session.get(Service, service_id)

    def get_barber(self, barber_id: int) -> Optional[Barber]:
        with self._guard("get_barber"):
            return self.session.get(Barber, barber_id)

    def get_profile(self, profile_id: int) -> Optional[CustomerProfile]:
        with self._guard("get_profile"):
            return self.session.get(CustomerProfile, profile_id)

    def get_profile_for_user(self, user_id: int) -> Optional[CustomerProfile]:
        with self._guard("get_profile_for_user"):
            return self.session.exec(
                select(CustomerProfile).where(CustomerProfile.user_id == user_id)
            ).first()

    def list_active_services(self) -> List[Service]:
        with self._guard("list_active_services"):
            return list(
                self.session.exec(select(Service).where(Service.active == True).order_by(Service.name)).all()  # noqa: E712
            )

    def list_active_barbers(self) -> List[Barber]:
        with self._guard("list_active_barbers"):
            return list(
                self.session.exec(select(Barber).where(Barber.active == True).order_by(Barber.name)).all()  # noqa: E712
            )
