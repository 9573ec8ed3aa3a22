"""Monitoring package for logging."""

from msp_migrate.monitoring.logger import configure_logger
from msp_migrate.monitoring.logger import log_response_info

__all__ = [
    "configure_logger",
    "log_response_info",
]
