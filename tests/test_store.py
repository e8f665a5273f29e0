# xml-ingestor/tests/test_store.py
from __future__ import annotations

import pytest

from xml_ingestor.errors import ObjectNotFound, StoreWriteFailure
from xml_ingestor.store import parse_s3_event


def test_put_then_get(store, s3):
    ack = store.put("mybucket", "orders/7.xml", b"<order/>", "application/xml")
    assert ack.location.uri == "s3://mybucket/orders/7.xml"
    assert ack.etag
    assert store.get("mybucket", "orders/7.xml") == b"<order/>"
    head = s3.head_object(Bucket="mybucket", Key="orders/7.xml")
    assert head["ContentType"] == "application/xml"
    assert head["ServerSideEncryption"] == "AES256"


def test_get_missing_key(store):
    with pytest.raises(ObjectNotFound) as exc:
        store.get("mybucket", "nope.xml")
    assert exc.value.code == "OBJECT_NOT_FOUND"


def test_put_to_missing_bucket(store):
    with pytest.raises(StoreWriteFailure):
        store.put("no-such-bucket", "k", b"x")


def test_subscribers_get_one_notification_per_put(store):
    seen = []
    store.subscribe(seen.append)
    store.put("mybucket", "a.xml", b"<a/>")
    assert len(seen) == 1
    assert seen[0].event_name == "ObjectCreated:Put"
    assert (seen[0].container, seen[0].key, seen[0].size) == ("mybucket", "a.xml", 4)


def test_failing_subscriber_does_not_fail_put(store):
    def boom(_):
        raise RuntimeError("consumer down")

    store.subscribe(boom)
    ack = store.put("mybucket", "a.xml", b"<a/>")
    assert ack.location.key == "a.xml"
    assert store.get("mybucket", "a.xml") == b"<a/>"


def test_parse_s3_event_unquotes_keys():
    event = {
        "Records": [
            {
                "eventName": "ObjectCreated:Put",
                "s3": {
                    "bucket": {"name": "mybucket"},
                    "object": {"key": "in/my+file%21.xml", "size": 12, "sequencer": "0055AED6DCD90281E5"},
                },
            },
            {
                "eventName": "ObjectRemoved:Delete",
                "s3": {"bucket": {"name": "mybucket"}, "object": {"key": "old.xml"}},
            },
        ]
    }
    notes = parse_s3_event(event)
    assert [n.key for n in notes] == ["in/my file!.xml", "old.xml"]
    assert notes[0].sequence_number == "0055AED6DCD90281E5"
    assert notes[0].is_creation
    assert not notes[1].is_creation


def test_parse_s3_test_event():
    assert parse_s3_event({"Service": "Amazon S3", "Event": "s3:TestEvent"}) == []
