import logging
import logging.config
from pathlib import Path
from app.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def build_logging_config(log_level: str = None, log_dir: str = None) -> dict:
    level = (log_level or settings.LOG_LEVEL).upper()
    log_dir = settings.LOG_DIR if log_dir is None else log_dir

    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": "detailed",
            "stream": "ext://sys.stdout"
        }
    }
    root_handlers = ["console"]

    if log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": level,
            "formatter": "detailed",
            "filename": str(Path(log_dir) / "app.log"),
            "maxBytes": 10485760,
            "backupCount": 5
        }
        handlers["error_file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "ERROR",
            "formatter": "detailed",
            "filename": str(Path(log_dir) / "error.log"),
            "maxBytes": 10485760,
            "backupCount": 5
        }
        root_handlers += ["file", "error_file"]

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "detailed": {
                "format": LOG_FORMAT
            }
        },
        "handlers": handlers,
        "root": {
            "level": level,
            "handlers": root_handlers
        },
        "loggers": {
            "app": {
                "level": level,
                "handlers": root_handlers,
                "propagate": False
            },
            "uvicorn.access": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False
            }
        }
    }


def configure_logging(log_level: str = None, log_dir: str = None):
    logging.config.dictConfig(build_logging_config(log_level, log_dir))
