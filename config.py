"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed constants.
"""

import os
from decimal import Decimal

from dotenv import load_dotenv

load_dotenv()


# ── Telegram ──────────────────────────────────────────────
TELEGRAM_BOT_TOKEN: str = os.getenv("TELEGRAM_BOT_TOKEN", "")

# Chat that receives reminders. When empty, the chat registered via /start is used.
_raw_owner = os.getenv("OWNER_CHAT_ID", "").strip()
OWNER_CHAT_ID: int | None = int(_raw_owner) if _raw_owner else None

# ── Record store ──────────────────────────────────────────
# "postgres" for the documents table, "memory" for a throwaway in-process store.
STORE_BACKEND: str = os.getenv("STORE_BACKEND", "postgres").lower()

DB_HOST: str = os.getenv("DB_HOST", "localhost")
DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
DB_NAME: str = os.getenv("DB_NAME", "tithe_bot")
DB_USER: str = os.getenv("DB_USER", "tithebot_user")
DB_PASS: str = os.getenv("DB_PASS", "")

DATABASE_URL: str = (
    f"postgresql://{DB_USER}:{DB_PASS}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
)

# ── Security ──────────────────────────────────────────────
_raw_ids = os.getenv("ALLOWED_USER_IDS", "")
ALLOWED_USER_IDS: list[int] = (
    [int(uid.strip()) for uid in _raw_ids.split(",") if uid.strip()]
    if _raw_ids
    else []
)

# ── Tithe ─────────────────────────────────────────────────
CURRENCY: str = os.getenv("CURRENCY", "ETB")
TITHE_RATE: Decimal = Decimal("0.10")

# ── Reminder defaults (used when no settings are stored yet) ──
DEFAULT_PUSH_ENABLED: bool = os.getenv("DEFAULT_PUSH_ENABLED", "false").lower() == "true"
DEFAULT_RECURRING: bool = os.getenv("DEFAULT_RECURRING", "true").lower() == "true"
DEFAULT_DAYS_BEFORE: int = int(os.getenv("DEFAULT_DAYS_BEFORE", "3"))
DEFAULT_REMINDER_TIME: str = os.getenv("DEFAULT_REMINDER_TIME", "09:00")
DEFAULT_SOUND_ENABLED: bool = os.getenv("DEFAULT_SOUND_ENABLED", "true").lower() == "true"

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
