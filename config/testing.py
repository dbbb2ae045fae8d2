import os

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

DEFAULT_LATE_THRESHOLD_MINUTES = 15
DEFAULT_OVERTIME_THRESHOLD_MINUTES = 30

LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")
DEBUG = False
TESTING = True
SQL_ECHO = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
