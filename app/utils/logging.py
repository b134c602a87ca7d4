"""
Logging configuration for the storefront service.

All modules log through ``get_logger(__name__)`` so output shares one
handler and one format; level comes from ``LOG_LEVEL``.
"""
import logging
import sys

from app.utils.settings import LOG_LEVEL

logger = logging.getLogger("storefront")
logger.setLevel(LOG_LEVEL)

if not logger.handlers:
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(LOG_LEVEL)
    console_handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(console_handler)

logger.propagate = False


def get_logger(name: str | None = None) -> logging.Logger:
    if name:
        return logging.getLogger(f"storefront.{name}")
    return logger
