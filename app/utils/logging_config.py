"""
Logging configuration for Interprep.

Configures the root and server loggers once at application startup so that
uvicorn, SQLAlchemy and application loggers share one console format.
"""
import logging
import logging.config
import sys
from typing import Dict, Any
from app.config import get_settings
from app.utils.logger import LOG_FORMAT

def get_logging_config() -> Dict[str, Any]:
    """Get logging configuration for the current settings."""
    settings = get_settings()
    log_level = settings.LOG_LEVEL.upper()

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": LOG_FORMAT,
                "datefmt": "%Y-%m-%d %H:%M:%S"
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": "standard",
                "stream": sys.stdout
            }
        },
        "loggers": {
            "": {
                "handlers": ["console"],
                "level": log_level
            },
            "uvicorn.access": {
                "handlers": ["console"],
                "level": "INFO",
                "propagate": False
            },
            "sqlalchemy.engine": {
                "handlers": ["console"],
                "level": "INFO" if settings.DATABASE_ECHO else "WARNING",
                "propagate": False
            },
            # SDK request logs are noisy at INFO
            "httpx": {
                "handlers": ["console"],
                "level": "WARNING",
                "propagate": False
            }
        }
    }

def setup_logging():
    """Apply the logging configuration."""
    logging.config.dictConfig(get_logging_config())
    logging.getLogger(__name__).debug("Logging configured")
