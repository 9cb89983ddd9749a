"""
Logging configuration.
"""
import logging
import sys

from pagescore.config import settings

# Create logger
logger = logging.getLogger("pagescore")
logger.setLevel(settings.LOG_LEVEL.upper())

# Console handler
console_handler = logging.StreamHandler(sys.stdout)
console_handler.setLevel(settings.LOG_LEVEL.upper())

# Formatter
formatter = logging.Formatter(
    "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
console_handler.setFormatter(formatter)

# Add handler
if not logger.handlers:
    logger.addHandler(console_handler)
