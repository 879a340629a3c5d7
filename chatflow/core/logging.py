import logging
import sys
import json
from datetime import datetime
from typing import Any, Dict

from chatflow.config import settings

ROOT_LOGGER_NAME = "chatflow"

class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Add extra fields if they exist
        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        return json.dumps(log_data, default=str)

def setup_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(settings.LOG_LEVEL.upper())

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)

    return logger

def get_logger(name: str) -> logging.Logger:
    """Child of the project logger, e.g. get_logger("generation") -> chatflow.generation"""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")

logger = setup_logger()
