# xml-ingestor/src/xml_ingestor/main.py
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config import HandlerConfig
from .decoder import decode
from .errors import DecodeError
from .ingestion import IngestionHandler
from .logging_cfg import init_logging
from .sink import build_sink
from .store import ObjectStore, parse_s3_event


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="xml-ingestor", description="XML ingestion pipeline CLI")
    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser("serve", help="Run the upload API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--inline-ingest", action="store_true", help="Parse every upload in-process")

    handle = sub.add_parser("handle", help="Run the ingestion handler on an S3 event JSON file")
    handle.add_argument("--event", required=True, type=str)

    dec = sub.add_parser("decode", help="Parse a local XML file and print the tree as JSON")
    dec.add_argument("path", type=str)

    args = parser.parse_args(argv)
    init_logging()

    if args.command == "serve":
        import uvicorn

        from .api import create_app

        store = ObjectStore()
        if args.inline_ingest:
            handler = IngestionHandler(HandlerConfig.from_settings(), store, build_sink())
            store.subscribe(lambda note: handler.handle([note]))
        uvicorn.run(create_app(store=store), host=args.host, port=args.port)
        return 0

    if args.command == "handle":
        event_path = Path(args.event).expanduser().resolve()
        if not event_path.exists():
            print(f"Event file not found: {event_path}", file=sys.stderr)
            return 3
        event = json.loads(event_path.read_text(encoding="utf-8"))
        config = HandlerConfig.from_settings()
        handler = IngestionHandler(config, ObjectStore(region=config.region), build_sink())
        report = handler.handle(parse_s3_event(event))
        print(report.model_dump_json(indent=2))
        return 0 if report.ok else 1

    if args.command == "decode":
        in_path = Path(args.path).expanduser().resolve()
        if not in_path.exists():
            print(f"Input not found: {in_path}", file=sys.stderr)
            return 3
        try:
            document = decode(in_path.read_bytes())
        except DecodeError as e:
            print(f"{in_path.name}: {e}", file=sys.stderr)
            return 1
        print(document.to_json())
        return 0

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
