# studyplan/core/config.py
from __future__ import annotations

import logging
import os
from typing import List
from pydantic import BaseModel


def _get_bool(env_name: str, default: bool = False) -> bool:
    val = os.getenv(env_name)
    if val is None:
        return default
    return str(val).strip().lower() not in {"0", "false", "no", "off", ""}


def _split_csv(env_name: str, default: str = "") -> List[str]:
    raw = os.getenv(env_name, default)
    if not raw:
        return []
    return [s.strip() for s in raw.split(",") if s.strip()]


class Settings(BaseModel):
    # ------------------------- App -------------------------
    APP_NAME: str = os.getenv("APP_NAME", "Study Plan Master")
    DEBUG: bool = _get_bool("DEBUG", False)
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # ------------------------- DB -------------------------
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///studyplan.db")

    # ------------------------- Demo user -------------------------
    # Every request acts as this user; there is no login flow.
    DEMO_USERNAME: str = os.getenv("DEMO_USERNAME", "demo")
    DEMO_PASSWORD: str = os.getenv("DEMO_PASSWORD", "password123")
    SEED_DEMO_DATA: bool = _get_bool("SEED_DEMO_DATA", True)

    # ------------------------- CORS -------------------------
    # e.g. CORS_ALLOW_ORIGINS="http://localhost:5173,http://127.0.0.1:3000"
    CORS_ALLOW_ORIGINS: List[str] = _split_csv("CORS_ALLOW_ORIGINS", "")

    # ------------------------- Derived flags -------------------------
    @property
    def DB_IS_SQLITE(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite:")

    @property
    def SQLALCHEMY_ECHO(self) -> bool:
        return self.DEBUG

    @property
    def LOG_LEVEL_VALUE(self) -> int:
        level = logging.getLevelName(self.LOG_LEVEL.strip().upper())
        return level if isinstance(level, int) else logging.INFO


settings = Settings()
