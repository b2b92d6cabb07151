"""
Structured JSON logging.

Call ``configure_logging`` once from the process entry point; every
module then logs through ``logging.getLogger(__name__)``::

    logger.info("client_registered", extra={"client_id": "alice"})

Each line is a JSON object with ``asctime``, ``level``, ``logger``,
``message`` and ``service`` plus any ``extra`` fields.  Plaintexts,
private keys and raw cipher errors must never be passed in ``extra``.
"""

from __future__ import annotations

import logging

from pythonjsonlogger.json import JsonFormatter

from .config import DEFAULT_SERVICE_NAME, VALID_LOG_LEVELS

LOG_FIELDS = ("asctime", "levelname", "name", "message", "service")

FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}


class ServiceNameFilter(logging.Filter):
    """Stamp every record with the service name."""

    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "service"):
            record.service = self.service_name
        return True


def create_json_formatter() -> JsonFormatter:
    format_string = " ".join(f"%({field})s" for field in LOG_FIELDS)
    return JsonFormatter(format_string, rename_fields=FIELD_RENAME_MAP)


def configure_logging(level: str = "INFO", service_name: str = DEFAULT_SERVICE_NAME) -> None:
    """Install a single JSON stream handler on the root logger.

    Raises ``ValueError`` for an unknown level name.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Invalid log level: {level}. Valid: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    handler = logging.StreamHandler()
    handler.setLevel(level_upper)
    handler.setFormatter(create_json_formatter())
    handler.addFilter(ServiceNameFilter(service_name))

    root = logging.getLogger()
    root.setLevel(level_upper)
    # Replace rather than append so repeated calls do not duplicate lines.
    root.handlers = [handler]
