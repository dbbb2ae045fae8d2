import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_handler: Optional[logging.Handler] = None


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Install a single stdout handler on the package logger."""
    global _handler

    package_logger = logging.getLogger(__package__.rpartition(".")[0] or "staff_ledger")
    package_logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    if _handler is None:
        _handler = logging.StreamHandler(sys.stdout)
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    if _handler not in package_logger.handlers:
        package_logger.addHandler(_handler)
    return package_logger
