# xml-ingestor/src/xml_ingestor/errors.py
"""Error taxonomy shared by the upload API and the ingestion handler."""
from __future__ import annotations

from typing import Optional


class IngestError(Exception):
    code = "INGEST_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MalformedRequest(IngestError):
    """Client-caused routing problem, raised before any write."""

    code = "MALFORMED_REQUEST"


class PayloadTooLarge(IngestError):
    code = "PAYLOAD_TOO_LARGE"


class StoreWriteFailure(IngestError):
    code = "STORE_WRITE_FAILED"


class StoreReadFailure(IngestError):
    code = "STORE_READ_FAILED"


class ObjectNotFound(StoreReadFailure):
    code = "OBJECT_NOT_FOUND"


class DecodeError(IngestError):
    """Bytes are not a well-formed XML document."""

    code = "DECODE_ERROR"

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None) -> None:
        if line is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)
        self.line = line
        self.column = column


class SinkFailure(IngestError):
    code = "SINK_FAILED"


class ConfigurationError(IngestError):
    code = "NOT_CONFIGURED"
