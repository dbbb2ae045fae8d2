from __future__ import annotations

import logging

from src.staff_ledger.staff_ledger.core.logging_config import LOG_FORMAT, configure_logging


def test_configure_logging_installs_one_handler():
    first = configure_logging("debug")
    second = configure_logging("WARNING")

    assert first is second
    ours = [h for h in second.handlers if h.formatter is not None and h.formatter._fmt == LOG_FORMAT]
    assert len(ours) == 1
    assert second.level == logging.WARNING
