# xml-ingestor/src/xml_ingestor/logging_cfg.py
from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, List

from .config import settings


def _secrets() -> List[str]:
    values = [settings.API_KEY, settings.AWS_SECRET_ACCESS_KEY, settings.SINK_TOKEN]
    # very short values would mask ordinary words
    return [v for v in values if v and len(v) >= 6]


def redact(text: str) -> str:
    for secret in _secrets():
        text = text.replace(secret, "****")
    return text


class RedactionFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if record.args:
            record.msg = record.getMessage()
            record.args = None
        if isinstance(record.msg, str):
            record.msg = redact(record.msg)
        return True


def init_logging() -> None:
    logger = logging.getLogger()
    if logger.handlers:
        return
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logger.setLevel(level)
    if settings.LOG_FILE:
        file_handler = RotatingFileHandler(settings.LOG_FILE, maxBytes=5_000_000, backupCount=3, encoding="utf-8")
        file_handler.setFormatter(JsonFormatter())
        file_handler.addFilter(RedactionFilter())
        logger.addHandler(file_handler)
    stream = logging.StreamHandler()
    stream.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    stream.addFilter(RedactionFilter())
    logger.addHandler(stream)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "level": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
