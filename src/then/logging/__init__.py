"""then logging — logging port and its structlog adapter."""

from then.logging.port import LoggingPort
from then.logging.structlog_adapter import StructlogAdapter, get_logger

__all__ = ["LoggingPort", "StructlogAdapter", "get_logger"]
