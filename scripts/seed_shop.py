from decimal import Decimal
from typing import Optional

from sqlmodel import Session, select

from barbershop.auth import hash_password
from barbershop.db import create_db_and_tables, engine
from barbershop.models import Barber, Service, User
from barbershop.schemas import UserRole


DEFAULT_SERVICES = [
    ("Corte", Decimal("40.00"), 40),
    ("Barba", Decimal("30.00"), 20),
    ("Combo Corte + Barba", Decimal("60.00"), 30),
]


def upsert_admin(session: Session, *, email: str, password: str) -> User:
    existing: Optional[User] = session.exec(select(User).where(User.email == email)).first()
    if existing:
        return existing
    admin = User(email=email, password_hash=hash_password(password), role=UserRole.admin.value)
    session.add(admin)
    session.commit()
    session.refresh(admin)
    return admin


def seed_catalog(session: Session) -> None:
    if session.exec(select(Service)).first() is None:
        for name, price, duration in DEFAULT_SERVICES:
            session.add(Service(name=name, price=price, duration=duration))
    if session.exec(select(Barber)).first() is None:
        session.add(Barber(name="Barbeiro 1"))
    session.commit()


if __name__ == "__main__":
    # Demo credentials; change them before running anywhere shared.
    admin_email = "admin@example.com"
    admin_password = "change-me-now"

    create_db_and_tables()
    with Session(engine) as session:
        created = upsert_admin(session, email=admin_email, password=admin_password)
        seed_catalog(session)
        print("Seeded admin:", created.email)
