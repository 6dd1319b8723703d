"""
Logging configuration using Loguru.

Modules log through ``get_logger(__name__)`` and attach structured fields
with ``extra={...}``. Loguru formats the message with those keyword fields,
so untrusted text (user content, provider errors, editor node ids) goes in
the fields, never in the message.
"""

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[module]}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[module]}:{line} - {message}"


def _console_format(record) -> str:
    """Console template; structured fields are appended when present."""
    template = CONSOLE_FORMAT
    if record["extra"].get("extra"):
        template += " <dim>{extra[extra]}</dim>"
    return template + "\n{exception}"


def _ensure_module(record) -> None:
    # Records from the bare loguru logger carry no bound module
    record["extra"].setdefault("module", record["name"])


def setup_logging(
    level: str = "INFO",
    log_to_file: bool = False,
    log_dir: str = "logs",
    file_rotation: str = "10 MB",
    file_retention: str = "7 days",
    compression: str = "zip",
    serialize: bool = True,
) -> None:
    """
    Configure Loguru sinks.

    Args:
        level: Minimum level for every sink
        log_to_file: Also write rotating files under ``log_dir``
        log_dir: Directory for log files
        file_rotation: Rotation trigger (size or interval)
        file_retention: How long rotated files are kept
        compression: Compression applied to rotated files
        serialize: Write file records as JSON lines
    """
    logger.remove()
    logger.configure(patcher=_ensure_module)

    logger.add(sys.stderr, level=level, format=_console_format, colorize=True)

    if log_to_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path / "notecoach_{time:YYYY-MM-DD}.log",
            level=level,
            format=FILE_FORMAT,
            rotation=file_rotation,
            retention=file_retention,
            compression=compression,
            serialize=serialize,
            enqueue=True,
        )


def get_logger(name: str):
    """Get a logger bound to a module name."""
    return logger.bind(module=name)
