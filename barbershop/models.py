# barbershop/models.py

from typing import Optional
from datetime import datetime, date as Date, time
from decimal import Decimal

from sqlalchemy import DateTime, Index, text
from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    password_hash: str
    role: str = "customer"  # customer, staff or admin


class CustomerProfile(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", unique=True)
    name: str
    phone: Optional[str] = None


class Barber(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    photo: Optional[str] = None
    active: bool = True


class Service(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    price: Decimal = Field(max_digits=10, decimal_places=2)
    duration: int  # minutes
    active: bool = True


class Appointment(SQLModel, table=True):
    # A cancelled appointment releases its (barber, date, start) key
    __table_args__ = (
        Index(
            "uq_active_barber_slot",
            "barber_id",
            "date",
            "start_time",
            unique=True,
            sqlite_where=text("status != 'cancelled'"),
            postgresql_where=text("status != 'cancelled'"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    customer_id: int = Field(foreign_key="customerprofile.id", index=True)
    barber_id: int = Field(foreign_key="barber.id", index=True)
    service_id: int = Field(foreign_key="service.id")
    date: Date = Field(index=True)
    start_time: time
    end_time: time
    status: str = "pending"
    paid: bool = False
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime())


class Payment(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    appointment_id: int = Field(foreign_key="appointment.id", index=True)
    amount: Decimal = Field(max_digits=10, decimal_places=2)
    method: str  # cash, pix, debit_card or credit_card
    paid_at: datetime = Field(default_factory=datetime.now, index=True, sa_type=DateTime())


class GalleryImage(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    url: str
    alt: str
    created_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime())


class Coupon(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    code: str = Field(index=True, unique=True)
    discount: int  # percent
    valid_until: Date
    active: bool = True


class Plan(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    price: Decimal = Field(max_digits=10, decimal_places=2)
    discount: int  # percent
    duration_months: int
    active: bool = True


class LoginAttempt(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    attempts: int = 0
    locked_until: Optional[datetime] = Field(default=None, sa_type=DateTime())
    updated_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime())
