"""
Logging for servercreator: plain or JSON lines on stderr, plus an optional
rotating file under ``LOG_DIR``. stdout is left to the console status lines.
"""
from __future__ import annotations
import json
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from . import __version__
from .settings import Settings

APP_NAME = "servercreator"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_FILE_NAME = "servercreator.log"


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "app": APP_NAME,
            "version": __version__,
            "level": record.levelname,
            "logger": record.name,
            "function": record.funcName,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _file_handler(log_dir: Path, formatter: logging.Formatter) -> logging.Handler | None:
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(log_dir / LOG_FILE_NAME, maxBytes=5_000_000, backupCount=3, encoding="utf-8")
    except OSError as e:
        sys.stderr.write(f"Could not open log file in {log_dir} ({e}), continuing with console logging only.\n")
        return None
    handler.setFormatter(formatter)
    return handler


def setup_logging(settings: Settings) -> None:
    level = settings.log_level.upper()
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    fmt = _JsonFormatter() if settings.log_json else logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console = logging.StreamHandler()
    console.setFormatter(fmt)
    root.addHandler(console)

    if settings.log_dir:
        handler = _file_handler(settings.log_dir, fmt)
        if handler is not None:
            handler.setLevel(level)
            logging.getLogger(APP_NAME).addHandler(handler)


def get_logger(name: str = APP_NAME) -> logging.Logger:
    return logging.getLogger(name)
