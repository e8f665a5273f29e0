# xml-ingestor/src/xml_ingestor/router.py
"""
Upload routing: decides where an inbound upload lands in the object store.

EXPLICIT takes container and key from the caller's path parameters.
GENERATED writes to the configured default container under the request id,
so callers that don't care about addressing can never overwrite each other.
"""
from __future__ import annotations

import re
from enum import Enum
from typing import Optional

from .config import settings
from .errors import ConfigurationError, MalformedRequest, PayloadTooLarge
from .logging_cfg import get_logger
from .models import PutAck, StoredObject, UploadRequest
from .store import ObjectStore

log = get_logger(__name__)

_BUCKET_RE = re.compile(r"[a-z0-9][a-z0-9.-]{1,61}[a-z0-9]")
_IP_RE = re.compile(r"\d{1,3}(\.\d{1,3}){3}")


class RoutingMode(str, Enum):
    EXPLICIT = "explicit"
    GENERATED = "generated"


class UploadRouter:
    def __init__(self, store: ObjectStore, default_container: Optional[str] = None) -> None:
        self.store = store
        self.default_container = default_container or settings.UPLOAD_BUCKET

    def route(self, request: UploadRequest, mode: RoutingMode) -> StoredObject:
        if not request.accept:
            raise MalformedRequest("Accept header is required")

        if mode is RoutingMode.GENERATED:
            if not self.default_container:
                raise ConfigurationError("UPLOAD_BUCKET is not configured")
            return StoredObject(container=self.default_container, key=request.request_id)

        if not request.container:
            raise MalformedRequest("container path parameter is required")
        if not request.key:
            raise MalformedRequest("key path parameter is required")
        _check_container(request.container)
        _check_key(request.key)
        return StoredObject(container=request.container, key=request.key)

    def upload(self, request: UploadRequest, mode: RoutingMode) -> PutAck:
        location = self.route(request, mode)
        if len(request.body) > settings.MAX_UPLOAD_BYTES:
            raise PayloadTooLarge(f"body is {len(request.body)} bytes, limit is {settings.MAX_UPLOAD_BYTES}")
        log.info(f"routing {mode.value} upload request_id={request.request_id} to {location.uri}")
        return self.store.put(location.container, location.key, request.body, request.content_type)


def _check_container(container: str) -> None:
    # S3 bucket naming: 3-63 chars of a-z 0-9 . -, alphanumeric at both ends
    if (
        not _BUCKET_RE.fullmatch(container)
        or ".." in container
        or _IP_RE.fullmatch(container)
    ):
        raise MalformedRequest(f"invalid container name: {container!r}")


def _check_key(key: str) -> None:
    if key.startswith("/"):
        raise MalformedRequest("key must not start with '/'")
    for segment in key.split("/"):
        if segment == "":
            raise MalformedRequest("key must not contain empty segments")
        if segment in {".", ".."}:
            raise MalformedRequest("key must not contain '.' or '..' segments")
