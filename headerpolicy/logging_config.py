# headerpolicy/logging_config.py

"""
Structured JSON logging for services that host the security-headers middleware.

One JSON object per log line on stdout, ready for Docker log drivers and
log aggregators. Fields passed via `extra=` (e.g. the header names a policy
writes) appear as top-level JSON keys.
"""

import logging
import sys

from pythonjsonlogger.json import JsonFormatter


def configure_logging(level: str = "INFO") -> None:
    """
    Replace the root logger's handlers with a single stdout JSON handler.

    Args:
        level (str): Log level name, e.g. "DEBUG" or "WARNING".
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
