# barbershop/booking.py
"""
Booking core: availability lookup, reservation and status transitions.

The slot filter here is an optimistic pre-check. The store's unique index on
active (barber, date, start) rows is what actually prevents double-booking;
a lost race comes back from the store as ``SlotConflictError``.
"""

import logging
from datetime import date as Date, time
from typing import Callable, List, Optional

from barbershop.config import Settings
from barbershop.errors import (
    AuthorizationError,
    BookingValidationError,
    NotFoundError,
    SlotConflictError,
)
from barbershop.models import Appointment
from barbershop.schemas import STAFF_ROLES, AppointmentStatus
from barbershop.slots import (
    compute_end_time,
    filter_available,
    generate_daily_slots,
    is_open_day,
    overlaps,
)
from barbershop.store import AppointmentStore

logger = logging.getLogger(__name__)

# status -> statuses it may move to
TRANSITIONS = {
    AppointmentStatus.pending: {AppointmentStatus.confirmed, AppointmentStatus.cancelled},
    AppointmentStatus.confirmed: {AppointmentStatus.completed, AppointmentStatus.cancelled},
    AppointmentStatus.cancelled: set(),
    AppointmentStatus.completed: set(),
}


def is_staff(role: str) -> bool:
    return role in STAFF_ROLES


class BookingService:
    def __init__(
        self,
        store: AppointmentStore,
        settings: Settings,
        today: Callable[[], Date] = Date.today,
    ):
        self.store = store
        self.settings = settings
        self.today = today

    def daily_slots(self) -> List[time]:
        s = self.settings
        return generate_daily_slots(s.open_time, s.close_time, s.slot_minutes)

    def is_bookable_date(self, day: Date) -> bool:
        return day >= self.today() and is_open_day(day, self.settings.closed_weekdays)

    def list_available_slots(self, barber_id: int, day: Date) -> List[time]:
        if not self.is_bookable_date(day):
            return []
        occupied = self.store.occupied_intervals(barber_id, day)
        return filter_available(
            self.daily_slots(),
            occupied,
            mode=self.settings.slot_collision_mode,
            interval_minutes=self.settings.slot_minutes,
        )

    def create_appointment(
        self,
        customer_id: int,
        barber_id: int,
        service_id: int,
        day: Date,
        start_time: time,
        notes: Optional[str] = None,
    ) -> Appointment:
        # 1) Resolve and validate the referenced entities
        if self.store.get_profile(customer_id) is None:
            raise NotFoundError("Customer profile not found")

        barber = self.store.get_barber(barber_id)
        if barber is None:
            raise NotFoundError("Barber not found")
        if not barber.active:
            raise BookingValidationError("Barber is not available for booking")

        service = self.store.get_service(service_id)
        if service is None:
            raise NotFoundError("Service not found")
        if not service.active:
            raise BookingValidationError("Service is not available")
        if service.duration <= 0:
            raise BookingValidationError("Service duration must be positive")

        # 2) Date and grid alignment
        if day < self.today():
            raise BookingValidationError("Cannot book an appointment in the past")
        if not is_open_day(day, self.settings.closed_weekdays):
            raise BookingValidationError("The shop is closed on that day")

        start_time = start_time.replace(second=0, microsecond=0)
        if start_time not in self.daily_slots():
            raise BookingValidationError("Start time is not one of the shop's slots")

        # 3) Optimistic availability check
        end_time = compute_end_time(start_time, service.duration)
        occupied = self.store.occupied_intervals(barber_id, day)
        available = filter_available(
            self.daily_slots(),
            occupied,
            mode=self.settings.slot_collision_mode,
            interval_minutes=self.settings.slot_minutes,
        )
        if start_time not in available:
            raise SlotConflictError("Slot no longer available, please pick another slot")
        if self.settings.slot_collision_mode == "overlap" and any(
            overlaps(start_time, end_time, s, e) for s, e in occupied
        ):
            raise SlotConflictError("Service would run into another appointment, please pick another slot")

        # 4) Build and persist; the store has the final word on conflicts
        appointment = Appointment(
            customer_id=customer_id,
            barber_id=barber_id,
            service_id=service_id,
            date=day,
            start_time=start_time,
            end_time=end_time,
            status=AppointmentStatus.pending.value,
            paid=False,
            notes=notes,
        )
        try:
            created = self.store.insert_appointment(appointment)
        except SlotConflictError:
            logger.info("lost booking race for barber %s on %s at %s", barber_id, day, start_time)
            raise

        logger.info(
            "appointment %s booked: barber=%s date=%s %s-%s",
            created.id, barber_id, day, created.start_time, created.end_time,
        )
        return created

    def _get(self, appointment_id: int) -> Appointment:
        appointment = self.store.get_appointment(appointment_id)
        if appointment is None:
            raise NotFoundError("Appointment not found")
        return appointment

    def cancel_appointment(
        self,
        appointment_id: int,
        actor_profile_id: Optional[int],
        actor_role: str,
    ) -> Appointment:
        appointment = self._get(appointment_id)

        # Authorization: the customer who booked OR staff/admin
        if not is_staff(actor_role) and appointment.customer_id != actor_profile_id:
            raise AuthorizationError("Only the customer who booked or staff may cancel")

        status = AppointmentStatus(appointment.status)
        if status == AppointmentStatus.cancelled:
            # retried cancel: nothing to do
            return appointment
        if status == AppointmentStatus.completed:
            raise BookingValidationError("A completed appointment cannot be cancelled")

        appointment = self.store.set_status(appointment, AppointmentStatus.cancelled)
        logger.info("appointment %s cancelled by %s", appointment_id, actor_role)
        return appointment

    def _transition(self, appointment_id: int, actor_role: str, target: AppointmentStatus) -> Appointment:
        if not is_staff(actor_role):
            raise AuthorizationError("Only staff may change appointment status")
        appointment = self._get(appointment_id)
        current = AppointmentStatus(appointment.status)
        if target not in TRANSITIONS[current]:
            raise BookingValidationError(
                f"Cannot move appointment from {current.value} to {target.value}"
            )
        appointment = self.store.set_status(appointment, target)
        logger.info("appointment %s %s -> %s", appointment_id, current.value, target.value)
        return appointment

    def confirm_appointment(self, appointment_id: int, actor_role: str) -> Appointment:
        return self._transition(appointment_id, actor_role, AppointmentStatus.confirmed)

    def complete_appointment(self, appointment_id: int, actor_role: str) -> Appointment:
        return self._transition(appointment_id, actor_role, AppointmentStatus.completed)
