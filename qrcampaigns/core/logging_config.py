import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from qrcampaigns.core.config import settings

LOGGER_NAME = "qrcampaigns"

_configured = False


def setup_logging() -> logging.Logger:
    """
    Configure the package logger once: console output plus a rotating file
    under LOG_DIR (10 MB x 5) when LOG_DIR is set.
    """
    global _configured

    logger = logging.getLogger(LOGGER_NAME)
    if _configured:
        return logger

    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logger.setLevel(level)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if settings.LOG_DIR:
        os.makedirs(settings.LOG_DIR, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(settings.LOG_DIR, "qrcampaigns.log"),
            maxBytes=10485760,
            backupCount=5,
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    _configured = True
    return logger
