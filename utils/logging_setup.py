from __future__ import annotations

import logging
import sys
from typing import Any

from config.settings import get_settings


_INITIALIZED: bool = False

# HTTP and suffix-list chatter drowns out per-query lines at INFO
_NOISY_LOGGERS: tuple[str, ...] = ("urllib3", "requests", "tldextract", "filelock")

LOG_FORMAT = (
    "%(asctime)s %(levelname)s %(message)s "
    "run_id=%(run_id)s platform=%(platform)s step=%(step)s "
    "provider=%(provider)s status=%(status)s duration_ms=%(duration_ms)s error=%(error)s"
)


class SafeExtraFormatter(logging.Formatter):
    """Formatter that tolerates missing extra fields by injecting defaults."""

    DEFAULTS: dict[str, Any] = {
        "run_id": "-",
        "platform": "-",
        "step": "-",
        "provider": "-",
        "status": "-",
        "duration_ms": "-",
        "error": "-",
    }

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        for key, value in self.DEFAULTS.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return super().format(record)


def init_logging(level: str | None = None) -> None:
    """Configure the root logger once; stdout stays free for JSON output."""
    global _INITIALIZED
    if _INITIALIZED:
        return

    log_level = getattr(logging, (level or get_settings().log_level).upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(log_level)
        handler.setFormatter(SafeExtraFormatter(fmt=LOG_FORMAT))
        root_logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    _INITIALIZED = True
