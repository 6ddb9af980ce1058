from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from taskclock.config import SETTINGS, PROJECT_ROOT, Settings

LOG_FILE_NAME = "taskclock.log"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Statement echo from SQLAlchemy is only wanted when debugging.
QUIET_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool")


def setup_logging(settings: Settings = SETTINGS, file_name: str = LOG_FILE_NAME) -> Path:
    log_dir = PROJECT_ROOT / settings.log_dir
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / file_name
    level = settings.log_level.upper()

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    file_handler = RotatingFileHandler(
        log_file, maxBytes=2_000_000, backupCount=3, encoding="utf-8"
    )
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=[file_handler, console_handler], force=True)

    sql_level = logging.DEBUG if level == "DEBUG" else logging.WARNING
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(sql_level)
    return log_file
