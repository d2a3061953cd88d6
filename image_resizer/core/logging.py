"""
Logging configuration for the Image Resizer.
"""

import logging
import sys
import os
from datetime import datetime
from typing import Optional

from image_resizer.config import Settings, get_settings

# Configure logging format
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """
    Set up logging configuration.

    Args:
        settings: Settings to configure from (defaults to get_settings())

    Returns:
        Logger instance
    """
    settings = settings or get_settings()
    log_level = logging.DEBUG if settings.DEV_MODE else logging.INFO

    handlers = [logging.StreamHandler(sys.stdout)]
    if settings.LOG_DIR:
        # Create logs directory if it doesn't exist
        os.makedirs(settings.LOG_DIR, exist_ok=True)
        current_date = datetime.now().strftime("%Y-%m-%d")
        log_file = os.path.join(settings.LOG_DIR, f"image_resizer_{current_date}.log")
        handlers.append(logging.FileHandler(log_file))

    # Configure root logger
    logging.basicConfig(level=log_level, format=LOG_FORMAT, handlers=handlers)

    # Set log levels for libraries to avoid excessive logs
    logging.getLogger("google").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)

    app_logger = logging.getLogger("image_resizer")
    app_logger.setLevel(log_level)

    return app_logger


# Shared logger instance; handlers are attached by setup_logging()
logger = logging.getLogger("image_resizer")
