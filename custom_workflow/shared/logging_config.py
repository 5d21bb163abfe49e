"""Centralized logging configuration with correlation ID support."""

import logging
import sys
import uuid
from contextvars import ContextVar
from pythonjsonlogger import jsonlogger

correlation_id_var: ContextVar[str] = ContextVar('correlation_id', default='')


class CorrelationIdFilter(logging.Filter):
    """Adds correlation_id to all log records"""

    def filter(self, record):
        record.correlation_id = correlation_id_var.get('')
        return True


def setup_logging(service_name: str, level: int = logging.INFO) -> None:
    """Sets up JSON logging with correlation ID support"""
    logger = logging.getLogger()
    logger.setLevel(level)
    logger.handlers = []

    json_handler = logging.StreamHandler(sys.stderr)
    formatter = jsonlogger.JsonFormatter(
        '%(asctime)s %(name)s %(levelname)s %(correlation_id)s %(message)s',
        rename_fields={
            'asctime': 'timestamp',
            'name': 'logger',
            'levelname': 'level',
        }
    )

    json_handler.setFormatter(formatter)
    json_handler.addFilter(CorrelationIdFilter())
    logger.addHandler(json_handler)
    logging.debug(f"{service_name} logging configured with JSON format and correlation ID support")


def set_correlation_id(correlation_id: str) -> None:
    correlation_id_var.set(correlation_id)


def get_correlation_id() -> str:
    return correlation_id_var.get('')


def new_correlation_id() -> str:
    """Generates and activates a fresh correlation ID"""
    correlation_id = str(uuid.uuid4())
    set_correlation_id(correlation_id)
    return correlation_id
