# barbershop/routers/auth_routes.py

import logging
from datetime import datetime, timedelta

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import Session, select

from barbershop.auth import create_access_token, verify_password
from barbershop.config import Settings, get_settings
from barbershop.db import get_session
from barbershop.models import LoginAttempt, User
from barbershop.schemas import Token

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


def _record_failure(session: Session, attempt: LoginAttempt, settings: Settings) -> None:
    now = datetime.now()
    attempt.attempts += 1
    attempt.updated_at = now
    if attempt.attempts >= settings.login_max_attempts:
        attempt.locked_until = now + timedelta(minutes=settings.login_lockout_minutes)
        attempt.attempts = 0
        logger.warning("login locked for %s until %s", attempt.email, attempt.locked_until)
    session.add(attempt)
    session.commit()


@router.post("/login", response_model=Token)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    email = form_data.username
    password = form_data.password

    user = session.exec(
        select(User).where(User.email == email)
    ).first()

    # Only real accounts are tracked, unknown emails never create rows
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    attempt = session.exec(
        select(LoginAttempt).where(LoginAttempt.email == email)
    ).first()
    if attempt is None:
        attempt = LoginAttempt(email=email)

    if attempt.locked_until is not None:
        if attempt.locked_until > datetime.now():
            raise HTTPException(status_code=429, detail="Too many failed attempts, try again later")
        attempt.locked_until = None

    if not verify_password(password, user.password_hash):
        _record_failure(session, attempt, settings)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if attempt.id is not None:
        session.delete(attempt)
        session.commit()

    token = create_access_token({"sub": user.email}, settings)
    return {"access_token": token, "token_type": "bearer"}
