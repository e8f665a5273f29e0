# xml-ingestor/src/xml_ingestor/sink.py
from __future__ import annotations

import json
from typing import Optional

import requests

from .config import settings
from .errors import SinkFailure
from .logging_cfg import get_logger
from .models import StoredObject, XmlNode

log = get_logger(__name__)


class DocumentSink:
    """Where parsed documents go once a notification has been decoded."""

    def deliver(self, location: StoredObject, document: XmlNode) -> None:
        raise NotImplementedError


class LogSink(DocumentSink):
    def deliver(self, location: StoredObject, document: XmlNode) -> None:
        log.info(f"parsed {location.uri}: {document.to_json()}")


class HttpSink(DocumentSink):
    """
    Posts parsed documents as JSON to a downstream endpoint.
    Defaults to values from settings but allows per-call overrides via __init__.
    """

    def __init__(self, endpoint: Optional[str] = None, token: Optional[str] = None, timeout_s: Optional[int] = None) -> None:
        self.endpoint = endpoint or str(settings.SINK_ENDPOINT)
        self.token = token or settings.SINK_TOKEN
        self.timeout_s = timeout_s or settings.SINK_TIMEOUT_S

    def deliver(self, location: StoredObject, document: XmlNode) -> None:
        """
        POST {"container", "key", "document"}.
        - Auth: Bearer <token> if provided
        - Any 2xx is success; anything else raises SinkFailure
        """
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        # the document is pre-rendered so its depth is not limited by json.dumps
        payload = '{"container": %s, "key": %s, "document": %s}' % (
            json.dumps(location.container),
            json.dumps(location.key),
            document.to_json(),
        )
        try:
            resp = requests.post(self.endpoint, data=payload.encode("utf-8"), headers=headers, timeout=self.timeout_s)
        except requests.RequestException as e:
            raise SinkFailure(f"sink unreachable: {e}") from e
        if not (200 <= resp.status_code < 300):
            raise SinkFailure(f"sink HTTP {resp.status_code}: {resp.text[:200]}")


def build_sink() -> DocumentSink:
    if settings.SINK_ENDPOINT:
        return HttpSink()
    return LogSink()
