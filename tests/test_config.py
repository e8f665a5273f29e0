# xml-ingestor/tests/test_config.py
from __future__ import annotations

import json
import logging

import pytest
from pydantic import ValidationError

from xml_ingestor.audit import AuditLog
from xml_ingestor.config import HandlerConfig, Settings, settings
from xml_ingestor.logging_cfg import JsonFormatter, RedactionFilter


def test_handler_config_from_settings(monkeypatch):
    monkeypatch.setattr(settings, "TARGET_BUCKET", "0822-api-target-xml-bucket")
    monkeypatch.setattr(settings, "AWS_REGION", "eu-west-1")
    cfg = HandlerConfig.from_settings()
    assert cfg.target_container == "0822-api-target-xml-bucket"
    assert cfg.region == "eu-west-1"
    assert cfg.min_remaining_ms == 2000


def test_blank_buckets_are_unset():
    s = Settings(TARGET_BUCKET="  ", UPLOAD_BUCKET="")
    assert s.TARGET_BUCKET is None
    assert s.UPLOAD_BUCKET is None


def test_negative_budget_rejected():
    with pytest.raises(ValidationError):
        Settings(MIN_REMAINING_MS=-1)


def test_redaction_masks_api_key(monkeypatch):
    monkeypatch.setattr(settings, "API_KEY", "MyApiKeyThatIsAtLeast20Characters")
    record = logging.LogRecord("t", logging.INFO, __file__, 1, "key=%s", ("MyApiKeyThatIsAtLeast20Characters",), None)
    RedactionFilter().filter(record)
    assert record.getMessage() == "key=****"
    assert json.loads(JsonFormatter().format(record))["msg"] == "key=****"


def test_audit_disabled_without_path():
    audit = AuditLog()
    assert audit.path is None
    audit.append("delivered", key="a.xml")


def test_audit_rotates_large_file(tmp_path):
    path = tmp_path / "audit.jsonl"
    audit = AuditLog(path)
    audit.max_bytes = 10
    audit.append("uploaded", key="a.xml")
    audit.append("uploaded", key="b.xml")
    assert len(list(tmp_path.glob("audit-*.jsonl"))) == 1
    assert "b.xml" in path.read_text(encoding="utf-8")
