# barbershop/routers/users_routes.py

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from barbershop.auth import get_current_user, hash_password
from barbershop.db import get_session
from barbershop.deps import require_role
from barbershop.models import CustomerProfile, User
from barbershop.schemas import RoleUpdate, UserCreate, UserPublic, UserRole
from barbershop.store import SqlAppointmentStore

router = APIRouter(
    tags=["users"],
)


@router.get("/me", response_model=UserPublic)
def me(current_user: dict = Depends(get_current_user)):
    return {
        "id": current_user["id"],
        "email": current_user["email"],
        "role": current_user["role"],
        "profile_id": current_user["profile_id"],
    }


@router.post("/users", status_code=201, response_model=UserPublic)
def create_user(
    user: UserCreate,
    session: Session = Depends(get_session),
):
    # 1) Check if email already exists
    existing = session.exec(
        select(User).where(User.email == user.email)
    ).first()
    if existing is not None:
        raise HTTPException(status_code=409, detail="Email already registered")

    # 2) Create user and its customer profile together
    db_user = User(
        email=user.email,
        password_hash=hash_password(user.password),
        role=UserRole.customer.value,
    )
    session.add(db_user)
    session.flush()  # fills db_user.id

    profile = CustomerProfile(user_id=db_user.id, name=user.name, phone=user.phone)
    session.add(profile)
    session.commit()
    session.refresh(db_user)
    session.refresh(profile)

    # 3) Return public user
    return {
        "id": db_user.id,
        "email": db_user.email,
        "role": db_user.role,
        "profile_id": profile.id,
    }


@router.put("/users/{user_id}/role", response_model=UserPublic)
def set_role(
    user_id: int,
    body: RoleUpdate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, UserRole.admin.value)

    db_user = session.get(User, user_id)
    if db_user is None:
        raise HTTPException(status_code=404, detail="User not found")

    db_user.role = body.role.value
    session.add(db_user)
    session.commit()
    session.refresh(db_user)

    profile = SqlAppointmentStore(session).get_profile_for_user(db_user.id)
    return {
        "id": db_user.id,
        "email": db_user.email,
        "role": db_user.role,
        "profile_id": profile.id if profile else None,
    }
