# barbershop/db.py

from sqlmodel import SQLModel, Session, create_engine

from barbershop.config import get_settings


def build_engine(database_url: str, echo: bool = False):
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False  # required for SQLite + FastAPI
    return create_engine(database_url, echo=echo, connect_args=connect_args)


_settings = get_settings()

# Engine = connection to the database
engine = build_engine(_settings.database_url, echo=_settings.sql_echo)


def create_db_and_tables(bind=None):
    # Import so every table is registered on SQLModel.metadata
    import barbershop.models  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)


# Dependency: one session per request
def get_session():
    with Session(engine) as session:
        yield session
