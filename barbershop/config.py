# barbershop/config.py

from functools import lru_cache
from datetime import time
from typing import List, Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    # Database
    database_url: str = Field(default="sqlite:///./barbershop.db", alias="DATABASE_URL")
    sql_echo: bool = Field(default=False, alias="SQL_ECHO")

    # Auth / JWT
    jwt_secret_key: str = Field(default="change-me-later", alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(default=30, alias="ACCESS_TOKEN_EXPIRE_MINUTES")
    login_max_attempts: int = Field(default=5, alias="LOGIN_MAX_ATTEMPTS")
    login_lockout_minutes: int = Field(default=15, alias="LOGIN_LOCKOUT_MINUTES")

    # Shop hours: one fixed grid per business day
    open_time: time = Field(default=time(10, 0), alias="SHOP_OPEN_TIME")
    close_time: time = Field(default=time(18, 0), alias="SHOP_CLOSE_TIME")
    slot_minutes: int = Field(default=40, gt=0, alias="SLOT_INTERVAL_MINUTES")
    # 0=Mon ... 6=Sun
    closed_weekdays: List[int] = Field(default_factory=lambda: [6], alias="SHOP_CLOSED_WEEKDAYS")
    # "start" only rejects equal start times, "overlap" rejects any intersecting slot
    slot_collision_mode: Literal["start", "overlap"] = Field(default="start", alias="SLOT_COLLISION_MODE")

    # HTTP
    allowed_origins: str = Field(default="http://localhost:5173", alias="ALLOWED_ORIGINS")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
