import os

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///staff_ledger.db")

DEFAULT_LATE_THRESHOLD_MINUTES = int(os.getenv("DEFAULT_LATE_THRESHOLD_MINUTES", "15"))
DEFAULT_OVERTIME_THRESHOLD_MINUTES = int(os.getenv("DEFAULT_OVERTIME_THRESHOLD_MINUTES", "30"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
DEBUG = True
SQL_ECHO = bool(int(os.getenv("SQL_ECHO", "0")))

# Apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
