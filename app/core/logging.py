import sys
from logging.config import dictConfig
from typing import Any

ACCESS_FORMAT = '%(levelprefix)s %(asctime)s [%(name)s] "%(request_line)s" %(status_code)s'
DEFAULT_FORMAT = "%(levelprefix)s %(asctime)s [%(name)s] %(message)s"


def build_logging_config(app_level: str = "INFO") -> dict[str, Any]:
    """Uvicorn-compatible dictConfig with the ``app`` loggers at *app_level*.

    Application loggers carry no handler of their own and propagate to the root
    handler, so every record is written once (and is visible to pytest's caplog).
    """
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "()": "uvicorn.logging.DefaultFormatter",
                "fmt": DEFAULT_FORMAT,
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "access": {
                "()": "uvicorn.logging.AccessFormatter",
                "fmt": ACCESS_FORMAT,
            },
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": sys.stderr,
            },
            "access": {
                "class": "logging.StreamHandler",
                "formatter": "access",
                "stream": sys.stdout,
                "level": "INFO",
            },
        },
        "root": {"handlers": ["default"], "level": "WARNING"},
        "loggers": {
            "uvicorn.error": {"handlers": ["default"], "level": "INFO", "propagate": False},
            "uvicorn.access": {"handlers": ["access"], "level": "INFO", "propagate": False},
            "app": {"level": app_level.upper(), "propagate": True},
        },
    }


def setup_logging(app_level: str = "INFO") -> None:
    """Configures application-wide logging using dictConfig."""
    dictConfig(build_logging_config(app_level))
