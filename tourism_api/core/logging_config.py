import os
import sys

from loguru import logger

from tourism_api.core.config import LOG_DIR, LOG_LEVEL

# Create folder if missing
if not os.path.exists(LOG_DIR):
    os.makedirs(LOG_DIR)

# Remove default handler
logger.remove()

logger.add(sys.stderr, level=LOG_LEVEL, format="{time} | {level} | {message}")

# General application log
logger.add(
    f"{LOG_DIR}/app.log",
    rotation="1 week",
    retention="4 weeks",
    level="INFO",
    enqueue=True,
    format="{time} | {level} | {message}"
)


def _concern_sink(filename: str, log_type: str):
    logger.add(
        f"{LOG_DIR}/{filename}",
        rotation="1 week",
        retention="4 weeks",
        level="INFO",
        enqueue=True,
        filter=lambda record: record["extra"].get("log_type") == log_type,
        format="{time} | {level} | {message}"
    )


# Site admin lifecycle (create / update / delete)
_concern_sink("admin.log", "admin")

# Event lifecycle
_concern_sink("events.log", "event")

# Guide lifecycle
_concern_sink("guides.log", "guide")

# Booking logs
_concern_sink("bookings.log", "booking")

# Image staging / promotion / removal
_concern_sink("storage.log", "storage")

# Error logs
logger.add(
    f"{LOG_DIR}/errors.log",
    rotation="1 week",
    retention="8 weeks",
    level="ERROR",
    enqueue=True,
)


def get_logger():
    return logger
