"""Observability – structured logging ports and helpers."""
from doc_optimizer.observability.logging.protocol import Logger
from doc_optimizer.observability.logging.filters import DEFAULT_SENSITIVE_FIELDS, SensitiveFieldsFilter
from doc_optimizer.observability.logging.factory import JsonLoggerFactory, parse_level
from doc_optimizer.observability.logging.processors import get_logger, log_safely

__all__ = [
    "DEFAULT_SENSITIVE_FIELDS",
    "JsonLoggerFactory",
    "Logger",
    "SensitiveFieldsFilter",
    "get_logger",
    "log_safely",
    "parse_level",
]
