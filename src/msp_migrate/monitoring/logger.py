import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Optional
from typing import Union

import loguru
from fastapi import Response
from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<bold><white>{message}</white></bold> | <dim>{extra}</dim> {stacktrace}"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message} | {extra} {stacktrace}"


# Loggers configuration runs at import time -- src/msp_migrate/__init__.py
# and again from create_app() once settings are known.
def configure_logger(
    level: str = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    rotation: str = "10 MB",
    retention: int = 5,
):
    """
    Configure loguru logger with a console sink and an optional file sink.

    Args:
        level: Minimum level for both sinks
        log_file: Path of a rotating log file; no file sink when None
        rotation: Size or interval after which the file is rotated
        retention: Number of rotated files to keep
    """
    # Suppress verbose HTTP transport logging (retries are logged by urllib3 at DEBUG/WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    logger.remove()  # remove the default logger

    logger.add(
        sink=sys.stdout,
        level=level,
        diagnose=False,
        format=CONSOLE_FORMAT,
        filter=process_log_record,
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            sink=str(log_path),
            level=level,
            diagnose=False,
            format=FILE_FORMAT,
            filter=process_log_record,
            rotation=rotation,
            retention=retention,
            enqueue=True,  # sink is shared by the thread pool running migrations
        )
        logger.info("File logging enabled", log_file=str(log_path), rotation=rotation)


def process_log_record(record: "loguru.Record") -> "loguru.Record":
    r"""
    Inject transformed metadata into each log record before they are passed to the formatter.

    1. Serialize the "extra" field to JSON so that structured fields render on one line.
    2. For error logs, add a traceback with \r instead of \n so that log shippers do not
       split the traceback into multiple log events.
    """
    extra = record["extra"]

    # serialize "extra" field to JSON
    if extra and not isinstance(extra, str):
        record["extra"] = json.dumps(extra, default=str)

    # add stacktrace to log record
    record["stacktrace"] = ""
    if record["exception"]:
        err = record["exception"]
        stacktrace = get_formatted_stacktrace(err, replace_newline_character_with_carriage_return=True)
        record["stacktrace"] = stacktrace

    return record


def get_formatted_stacktrace(loguru_record_exception, replace_newline_character_with_carriage_return: bool) -> str:
    """Get the formatted stacktrace for the current exception."""
    exc_type, exc_value, exc_traceback = loguru_record_exception
    stacktrace_: list[str] = traceback.format_exception(exc_type, exc_value, exc_traceback)
    stacktrace: str = "".join(stacktrace_)
    if replace_newline_character_with_carriage_return:
        stacktrace = stacktrace.replace("\n", "\r")
    return stacktrace


def log_response_info(response: Response):
    """Log the response info."""
    response_info = {
        "status_code": response.status_code,
        "headers": dict(response.headers.items()),
    }
    logger.debug("Response sent", http_response=response_info)
