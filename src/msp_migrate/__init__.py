"""msp_migrate."""

from .monitoring.logger import configure_logger

# Configure logger with default settings (just console logging)
# File logging can be enabled by calling configure_logger with a log_file
configure_logger()
