import logging
import os
from logging.config import dictConfig

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging() -> None:
    """Configure root logging for the curriculum service from environment flags."""
    level = os.getenv("OPENLEARN_LOG_LEVEL", "INFO").upper()
    debug_http = os.getenv("OPENLEARN_DEBUG_HTTP", "0") == "1"

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": os.getenv("OPENLEARN_LOG_FORMAT", DEFAULT_LOG_FORMAT),
                },
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "loggers": {
                # httpx logs every request at INFO; only surface it when tracing backend calls.
                "httpx": {"level": "DEBUG" if debug_http else "WARNING"},
                "openlearn.telemetry": {"level": "DEBUG" if debug_http else level},
            },
            "root": {
                "handlers": ["default"],
                "level": level,
            },
        }
    )

    if debug_http:
        logging.getLogger("uvicorn.access").setLevel(logging.DEBUG)
