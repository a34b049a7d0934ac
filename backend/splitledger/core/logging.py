"""
Logging setup for the application.
"""
import json
import logging
from datetime import datetime, timezone

from splitledger.core.config import settings


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record):
        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


def setup_logging() -> logging.Logger:
    """Configure the root logger once; plain format in debug, JSON otherwise."""
    logger = logging.getLogger()
    if getattr(logger, "_splitledger_configured", False):
        return logger

    handler = logging.StreamHandler()
    if settings.DEBUG:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
    else:
        formatter = StructuredFormatter()
    handler.setFormatter(formatter)

    logger.setLevel(logging.DEBUG if settings.DEBUG else settings.LOG_LEVEL.upper())
    logger.addHandler(handler)
    logger._splitledger_configured = True

    return logger
