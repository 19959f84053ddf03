# backend/tillbook/config.py
from __future__ import annotations
import os


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/tillbook.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",  # optional alternative location
        "sqlite:///tillbook.sqlite3",  # default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # "enforce": one OPEN/SUSPENDED till per (location, staff)
    # "allow": shared logins may run several drawers at once
    TILL_SINGLE_OPEN_POLICY = os.environ.get("TILL_SINGLE_OPEN_POLICY", "enforce").strip().lower()

    # Fallback cash detection for tenders missing from the registry
    CASH_TENDER_NAMES = tuple(
        n.strip().upper()
        for n in os.environ.get("CASH_TENDER_NAMES", "CASH").split(",")
        if n.strip()
    )

    CURRENCY_SYMBOL = os.environ.get("CURRENCY_SYMBOL", "₦")

    BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))
    SESSION_TTL_HOURS = int(os.environ.get("SESSION_TTL_HOURS", "24"))

    # Never leak exception text to clients unless explicitly enabled
    EXPOSE_INTERNAL_ERRORS = _env_flag("EXPOSE_INTERNAL_ERRORS")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    TILL_SINGLE_OPEN_POLICY = "enforce"
    BCRYPT_ROUNDS = 4
    LOG_LEVEL = "WARNING"
