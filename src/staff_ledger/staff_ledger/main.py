from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv

from config import get_settings_module

from .container import Container, build_container
from .core.constants import DEFAULT_LATE_THRESHOLD_MINUTES, DEFAULT_OVERTIME_THRESHOLD_MINUTES
from .core.logging_config import configure_logging
from .database.bootstrap import apply_schema, list_tables

logger = logging.getLogger(__name__)


async def create_app() -> Container:
    """Load settings for APP_ENV, configure logging and wire the services."""
    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    database_url = getattr(settings, "DATABASE_URL")
    debug = bool(getattr(settings, "DEBUG", False))

    if debug:
        logger.info("settings=%s db=%s", settings_module, database_url)

    container = build_container(
        database_url=database_url,
        echo=bool(getattr(settings, "SQL_ECHO", False)),
        late_threshold_minutes=int(getattr(settings, "DEFAULT_LATE_THRESHOLD_MINUTES", DEFAULT_LATE_THRESHOLD_MINUTES)),
        overtime_threshold_minutes=int(getattr(settings, "DEFAULT_OVERTIME_THRESHOLD_MINUTES", DEFAULT_OVERTIME_THRESHOLD_MINUTES)),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        await apply_schema(container.database)
        if debug:
            logger.info("schema ready (tables=%d)", len(await list_tables(container.database)))

    return container
