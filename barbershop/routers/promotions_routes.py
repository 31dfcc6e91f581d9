# barbershop/routers/promotions_routes.py

from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from barbershop.auth import get_current_user
from barbershop.db import get_session
from barbershop.deps import require_role
from barbershop.models import Coupon, Plan
from barbershop.schemas import (
    CouponCreate,
    CouponPublic,
    PlanCreate,
    PlanPublic,
    PromotionsResponse,
    UserRole,
)

router = APIRouter(
    prefix="/promotions",
    tags=["promotions"],
)


@router.get("", response_model=PromotionsResponse)
def list_promotions(session: Session = Depends(get_session)):
    coupons = session.exec(
        select(Coupon)
        .where(Coupon.active == True)  # noqa: E712
        .where(Coupon.valid_until >= date.today())
        .order_by(Coupon.valid_until)
    ).all()
    plans = session.exec(
        select(Plan).where(Plan.active == True).order_by(Plan.price)  # noqa: E712
    ).all()
    return {"coupons": coupons, "plans": plans}


@router.post("/coupons", response_model=CouponPublic, status_code=201)
def create_coupon(
    coupon: CouponCreate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, UserRole.admin.value)

    db_coupon = Coupon(**coupon.model_dump())
    session.add(db_coupon)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise HTTPException(status_code=409, detail="Coupon code already exists")

    session.refresh(db_coupon)
    return db_coupon


@router.post("/plans", response_model=PlanPublic, status_code=201)
def create_plan(
    plan: PlanCreate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, UserRole.admin.value)

    db_plan = Plan(**plan.model_dump())
    session.add(db_plan)
    session.commit()
    session.refresh(db_plan)
    return db_plan
