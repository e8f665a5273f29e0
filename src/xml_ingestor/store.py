# xml-ingestor/src/xml_ingestor/store.py
from __future__ import annotations

import urllib.parse as _url
from typing import Any, Callable, Dict, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .config import settings
from .errors import ObjectNotFound, StoreReadFailure, StoreWriteFailure
from .logging_cfg import get_logger
from .models import CreationNotification, PutAck, StoredObject

log = get_logger(__name__)

_NOT_FOUND_CODES = {"NoSuchKey", "NoSuchBucket", "404", "NotFound"}
# what S3 records when a PUT carries no Content-Type
S3_DEFAULT_CONTENT_TYPE = "binary/octet-stream"

Listener = Callable[[CreationNotification], Any]


class ObjectStore:
    """
    Thin S3 adapter. One instance (and its boto3 client) can be reused across
    requests and handler invocations.
    """

    def __init__(self, client=None, region: Optional[str] = None) -> None:
        self.client = client or boto3.client(
            "s3",
            region_name=region or settings.AWS_REGION,
            endpoint_url=settings.S3_ENDPOINT_URL,
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
            aws_session_token=settings.AWS_SESSION_TOKEN,
        )
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        """Register an in-process consumer of creation notifications."""
        self._listeners.append(listener)

    def put(self, container: str, key: str, body: bytes, content_type: Optional[str] = None) -> PutAck:
        kwargs: Dict[str, Any] = {"Bucket": container, "Key": key, "Body": body}
        if content_type:
            kwargs["ContentType"] = content_type
        if settings.S3_SSE_KMS_KEY_ID:
            kwargs["ServerSideEncryption"] = "aws:kms"
            kwargs["SSEKMSKeyId"] = settings.S3_SSE_KMS_KEY_ID
        else:
            kwargs["ServerSideEncryption"] = "AES256"

        try:
            resp = self.client.put_object(**kwargs)
        except (ClientError, BotoCoreError) as e:
            raise StoreWriteFailure(f"put s3://{container}/{key} failed: {e}") from e

        ack = PutAck(
            location=StoredObject(container=container, key=key),
            etag=resp.get("ETag"),
            content_type=content_type or S3_DEFAULT_CONTENT_TYPE,
        )
        log.info(f"stored {ack.location.uri} ({len(body)} bytes)")
        self._emit(CreationNotification(event_name="ObjectCreated:Put", container=container, key=key, size=len(body)))
        return ack

    def get(self, container: str, key: str) -> bytes:
        try:
            obj = self.client.get_object(Bucket=container, Key=key)
            return obj["Body"].read()
        except ClientError as e:
            code = str(e.response.get("Error", {}).get("Code", ""))
            if code in _NOT_FOUND_CODES:
                raise ObjectNotFound(f"s3://{container}/{key} not found") from e
            raise StoreReadFailure(f"get s3://{container}/{key} failed: {code or e}") from e
        except BotoCoreError as e:
            raise StoreReadFailure(f"get s3://{container}/{key} failed: {e}") from e

    def _emit(self, notification: CreationNotification) -> None:
        for listener in self._listeners:
            try:
                listener(notification)
            except Exception as e:
                # the write already succeeded; a consumer problem is not an upload failure
                log.error(f"listener failed for s3://{notification.container}/{notification.key}: {e}")


def parse_s3_event(event: Dict[str, Any]) -> List[CreationNotification]:
    """Turn an S3 notification document into CreationNotifications, in delivery order."""
    if event.get("Event") == "s3:TestEvent":
        log.info("received S3 test event, nothing to do")
        return []

    out: List[CreationNotification] = []
    for rec in event.get("Records", []):
        s3 = rec.get("s3", {})
        obj = s3.get("object", {})
        out.append(
            CreationNotification(
                event_name=rec.get("eventName", ""),
                container=s3.get("bucket", {}).get("name", ""),
                # keys arrive URL-encoded, spaces as '+'
                key=_url.unquote_plus(obj.get("key", ""), encoding="utf-8"),
                sequence_number=obj.get("sequencer"),
                size=obj.get("size"),
            )
        )
    return out
