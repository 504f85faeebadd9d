"""Structured JSON logging for engine decisions"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger.json import JsonFormatter

from trustlend.config import settings


class CustomJsonFormatter(JsonFormatter):
    """JSON lines stamped with service name and active parameter version"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name
        log_record.setdefault("parameter_version", settings.parameter_version)


def setup_logging(level: str = "INFO") -> None:
    """Send JSON logs to stdout, replacing any configured root handlers"""
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    root.addHandler(handler)


def log_decision(
    request_id: str,
    operation: str,
    decision_hash: str,
    duration_ms: float,
    **fields: Any,
) -> None:
    """One line per decision; decision_hash ties it to the orchestrator's audit record"""
    logging.info(
        "Decision completed",
        extra={
            "request_id": request_id,
            "step": "decision_complete",
            "operation": operation,
            "decision_hash": decision_hash,
            "duration_ms": round(duration_ms, 3),
            **fields,
        },
    )


def log_rejection(request_id: str, operation: str, reason: str, level: int = logging.WARNING, **fields: Any) -> None:
    logging.log(
        level,
        f"{operation} rejected: {reason}",
        extra={"request_id": request_id, "step": "rejected", "operation": operation, **fields},
    )


def log_error(request_id: str, path: str, error: BaseException) -> None:
    logging.error(
        f"Unhandled error on {path}: {error!r}",
        exc_info=error,
        extra={"request_id": request_id, "step": "error", "path": path},
    )
