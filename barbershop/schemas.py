# barbershop/schemas.py

from pydantic import BaseModel, Field
from enum import Enum
from datetime import datetime, date, time
from decimal import Decimal
from typing import List, Optional


class UserRole(str, Enum):
    customer = "customer"
    staff = "staff"
    admin = "admin"


STAFF_ROLES = (UserRole.staff.value, UserRole.admin.value)


class AppointmentStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    cancelled = "cancelled"
    completed = "completed"


class PaymentMethod(str, Enum):
    cash = "cash"
    pix = "pix"
    debit_card = "debit_card"
    credit_card = "credit_card"


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserCreate(BaseModel):
    email: str
    password: str = Field(min_length=8, max_length=72)
    name: str = Field(min_length=1)
    phone: Optional[str] = None


class UserPublic(BaseModel):
    id: int
    email: str
    role: UserRole
    profile_id: Optional[int] = None


class RoleUpdate(BaseModel):
    role: UserRole


class ServiceCreate(BaseModel):
    name: str = Field(min_length=1)
    price: Decimal = Field(ge=0)
    duration: int = Field(gt=0)
    active: bool = True


class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    price: Optional[Decimal] = Field(default=None, ge=0)
    duration: Optional[int] = Field(default=None, gt=0)
    active: Optional[bool] = None


class ServicePublic(BaseModel):
    id: int
    name: str
    price: Decimal
    duration: int
    active: bool


class BarberCreate(BaseModel):
    name: str = Field(min_length=1)
    photo: Optional[str] = None
    active: bool = True


class BarberUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    photo: Optional[str] = None
    active: Optional[bool] = None


class BarberPublic(BaseModel):
    id: int
    name: str
    photo: Optional[str] = None
    active: bool


class AppointmentCreate(BaseModel):
    barber_id: int
    service_id: int
    date: date
    start_time: time
    notes: Optional[str] = None
    # only honoured for staff booking on a customer's behalf
    customer_id: Optional[int] = None


class AppointmentPublic(BaseModel):
    id: int
    customer_id: int
    barber_id: int
    service_id: int
    date: date
    start_time: time
    end_time: time
    status: AppointmentStatus
    paid: bool
    notes: Optional[str] = None


class AvailabilityResponse(BaseModel):
    barber_id: int
    date: date
    open: bool
    available_starts: List[str]


class PaymentCreate(BaseModel):
    method: PaymentMethod
    amount: Optional[Decimal] = Field(default=None, gt=0)


class PaymentPublic(BaseModel):
    id: int
    appointment_id: int
    amount: Decimal
    method: PaymentMethod
    paid_at: datetime


class PaymentListItem(BaseModel):
    id: int
    appointment_id: int
    date: date
    customer_name: Optional[str] = None
    service_name: Optional[str] = None
    amount: Decimal
    method: PaymentMethod
    paid_at: datetime


class SummaryPeriod(str, Enum):
    month = "month"
    year = "year"


class FinancialSummary(BaseModel):
    period: SummaryPeriod
    start: date
    end: date
    total_revenue: Decimal
    transactions: int
    average_ticket: Decimal


class GalleryImageCreate(BaseModel):
    url: str = Field(min_length=1)
    alt: str = Field(min_length=1)


class GalleryImagePublic(BaseModel):
    id: int
    url: str
    alt: str


class CouponCreate(BaseModel):
    code: str = Field(min_length=1)
    discount: int = Field(gt=0, le=100)
    valid_until: date
    active: bool = True


class CouponPublic(BaseModel):
    id: int
    code: str
    discount: int
    valid_until: date


class PlanCreate(BaseModel):
    name: str = Field(min_length=1)
    price: Decimal = Field(ge=0)
    discount: int = Field(ge=0, le=100)
    duration_months: int = Field(gt=0)
    active: bool = True


class PlanPublic(BaseModel):
    id: int
    name: str
    price: Decimal
    discount: int
    duration_months: int


class PromotionsResponse(BaseModel):
    coupons: List[CouponPublic]
    plans: List[PlanPublic]
