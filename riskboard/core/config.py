# riskboard/core/config.py
from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv, find_dotenv

# ---------------------------
# Env loading (root .env first, then riskboard/.env as fallback)
# ---------------------------
load_dotenv(find_dotenv(usecwd=True))
load_dotenv(Path(__file__).resolve().parent.parent / ".env", override=False)


def _flag(name: str, default: str = "1") -> bool:
    return os.getenv(name, default) == "1"


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./riskboard.db")

# dev-only table bootstrap; production runs alembic
ENABLE_CREATE_ALL = _flag("ENABLE_CREATE_ALL")
ENABLE_SCHEDULER = _flag("ENABLE_SCHEDULER")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Optional JSON file overriding the built-in regulatory rule profile
RULES_FILE = os.getenv("RISKBOARD_RULES_FILE") or None

APP_TIMEZONE = os.getenv("APP_TIMEZONE") or None
SCHEDULER_HOUR = int(os.getenv("APP_SCHEDULER_HOUR", "6"))
SCHEDULER_MINUTE = int(os.getenv("APP_SCHEDULER_MINUTE", "0"))
