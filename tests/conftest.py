# xml-ingestor/tests/conftest.py
from __future__ import annotations

from typing import List, Tuple

import boto3
import pytest
from moto import mock_aws

from xml_ingestor.config import settings
from xml_ingestor.models import StoredObject, XmlNode
from xml_ingestor.sink import DocumentSink
from xml_ingestor.store import ObjectStore


class ListSink(DocumentSink):
    def __init__(self) -> None:
        self.delivered: List[Tuple[StoredObject, XmlNode]] = []

    def deliver(self, location: StoredObject, document: XmlNode) -> None:
        self.delivered.append((location, document))


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    monkeypatch.setattr(settings, "AWS_REGION", "us-east-1")
    monkeypatch.setattr(settings, "S3_ENDPOINT_URL", None)
    monkeypatch.setattr(settings, "S3_SSE_KMS_KEY_ID", None)
    monkeypatch.setattr(settings, "TARGET_BUCKET", None)
    monkeypatch.setattr(settings, "UPLOAD_BUCKET", "uploads")
    monkeypatch.setattr(settings, "API_KEY", "")
    monkeypatch.setattr(settings, "MAX_UPLOAD_BYTES", 10 * 1024 * 1024)
    monkeypatch.setattr(settings, "SINK_ENDPOINT", None)
    monkeypatch.setattr(settings, "SINK_TOKEN", None)
    monkeypatch.setattr(settings, "SLACK_WEBHOOK_URL", None)
    monkeypatch.setattr(settings, "LOG_FILE", None)
    monkeypatch.setattr(settings, "LOG_JSONL", None)
    monkeypatch.setattr(settings, "MIN_REMAINING_MS", 2000)


@pytest.fixture
def s3():
    with mock_aws():
        client = boto3.client("s3", region_name="us-east-1")
        client.create_bucket(Bucket="mybucket")
        client.create_bucket(Bucket="uploads")
        yield client


@pytest.fixture
def store(s3):
    return ObjectStore()


@pytest.fixture
def sink():
    return ListSink()
