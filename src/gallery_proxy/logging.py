"""Loguru setup for gallery-proxy.

Called once by the CLI before any command runs. Modules log through
``from loguru import logger`` with ``{}`` placeholders.
"""

import sys

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
FILE_ROTATION = "10 MB"
FILE_RETENTION = "7 days"


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: str | None = None,
):
    """Replace loguru's default sink with the service sinks.

    Args:
        level: Minimum level for every sink.
        json_output: Serialize stderr records as JSON lines instead of the
            colorized console format.
        log_file: Also write to this file, rotated at 10 MB and kept 7 days.

    Returns:
        The configured loguru logger.

    """
    logger.remove()

    if json_output:
        logger.add(sys.stderr, format="{message}", serialize=True, level=level)
    else:
        logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if log_file:
        logger.add(
            log_file,
            format=CONSOLE_FORMAT,
            level=level,
            rotation=FILE_ROTATION,
            retention=FILE_RETENTION,
            compression="gz",
        )
        logger.debug("Logging to file {}", log_file)

    return logger
