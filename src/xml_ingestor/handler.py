# xml-ingestor/src/xml_ingestor/handler.py
"""AWS Lambda entry point for S3 ObjectCreated notifications."""
from __future__ import annotations

from typing import Any, Dict, Optional

from .config import HandlerConfig
from .ingestion import IngestionHandler
from .logging_cfg import get_logger, init_logging
from .sink import build_sink
from .store import ObjectStore, parse_s3_event

log = get_logger(__name__)

# reused while the execution environment stays warm
_handler: Optional[IngestionHandler] = None


def get_handler() -> IngestionHandler:
    global _handler
    if _handler is None:
        init_logging()
        config = HandlerConfig.from_settings()
        _handler = IngestionHandler(config, ObjectStore(region=config.region), build_sink())
    return _handler


def reset_handler() -> None:
    global _handler
    _handler = None


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    # S3 invokes asynchronously and retries the whole event on error,
    # so per-item failures stay in the report instead of being raised.
    notifications = parse_s3_event(event)
    log.info(f"received {len(notifications)} notification(s)")
    remaining = getattr(context, "get_remaining_time_in_millis", None)
    report = get_handler().handle(notifications, remaining_ms=remaining)
    return report.model_dump()
