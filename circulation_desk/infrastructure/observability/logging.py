"""Structured JSON logging for circulation events"""

import logging
import sys
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional, TextIO
from pythonjsonlogger import jsonlogger

SERVICE_NAME = "circulation-desk"


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def __init__(self, *args: Any, service_name: str = SERVICE_NAME, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", stream: Optional[TextIO] = None, service_name: str = SERVICE_NAME) -> None:
    """
    Configure structured JSON logging.

    Logs go to stderr by default so they never interleave with the console menu on stdout.
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        service_name=service_name,
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_circulation_event(
    logger: logging.Logger,
    action: str,
    member_id: str,
    item_id: str,
    outcome: str,
    fine: Optional[Decimal] = None,
) -> None:
    """Log structured borrow/return outcome for analysis on the caller's logger"""
    extra: Dict[str, Any] = {
        "action": action,
        "member_id": member_id,
        "item_id": item_id,
        "outcome": outcome,
    }
    if fine is not None:
        extra["fine"] = str(fine)
    logger.info("Circulation %s", action, extra=extra)
