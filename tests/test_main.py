# xml-ingestor/tests/test_main.py
from __future__ import annotations

import json
from pathlib import Path

from xml_ingestor.main import main


def test_decode_command(tmp_path: Path, capsys):
    p = tmp_path / "order.xml"
    p.write_bytes(b'<order id="7"><item>pen</item></order>')
    assert main(["decode", str(p)]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["tag"] == "order"
    assert out["children"][0]["text"] == "pen"


def test_decode_command_malformed(tmp_path: Path, capsys):
    p = tmp_path / "bad.xml"
    p.write_bytes(b"<a><b></a>")
    assert main(["decode", str(p)]) == 1
    assert "mismatched tag" in capsys.readouterr().err


def test_decode_command_missing_file(tmp_path: Path):
    assert main(["decode", str(tmp_path / "nope.xml")]) == 3


def test_handle_command(s3, tmp_path: Path, capsys):
    s3.put_object(Bucket="mybucket", Key="a.xml", Body=b"<a/>")
    event = {
        "Records": [
            {"eventName": "ObjectCreated:Put", "s3": {"bucket": {"name": "mybucket"}, "object": {"key": "a.xml"}}},
            {"eventName": "ObjectCreated:Put", "s3": {"bucket": {"name": "mybucket"}, "object": {"key": "b.xml"}}},
        ]
    }
    ev = tmp_path / "event.json"
    ev.write_text(json.dumps(event), encoding="utf-8")

    assert main(["handle", "--event", str(ev)]) == 1
    report = json.loads(capsys.readouterr().out)
    assert report["delivered"] == 1
    assert report["failures"][0]["key"] == "b.xml"


def test_decode_command_deep_document(tmp_path: Path, capsys):
    p = tmp_path / "deep.xml"
    p.write_bytes(("<n>" * 3000 + "x" + "</n>" * 3000).encode("utf-8"))
    assert main(["decode", str(p)]) == 0
    out = capsys.readouterr().out
    assert out.startswith('{"tag": "n"')
    assert out.count('"tag": "n"') == 3000
