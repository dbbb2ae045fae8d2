import os

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///staff_ledger.db")

DEFAULT_LATE_THRESHOLD_MINUTES = int(os.getenv("DEFAULT_LATE_THRESHOLD_MINUTES", "15"))
DEFAULT_OVERTIME_THRESHOLD_MINUTES = int(os.getenv("DEFAULT_OVERTIME_THRESHOLD_MINUTES", "30"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
DEBUG = False
SQL_ECHO = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
