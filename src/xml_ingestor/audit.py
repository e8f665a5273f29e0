# xml-ingestor/src/xml_ingestor/audit.py
from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Any, Dict, Optional

from .config import settings
from .logging_cfg import get_logger

log = get_logger(__name__)


class AuditLog:
    """Append-only JSONL trail of uploads and notification outcomes."""

    def __init__(self, path: str | Path | None = None) -> None:
        target = path or settings.LOG_JSONL
        self.path: Optional[Path] = Path(target) if target else None
        self.max_bytes = 10_000_000

    def _rotate_if_needed(self) -> None:
        if self.path is None:
            return
        if self.path.exists() and self.path.stat().st_size > self.max_bytes:
            ts = time.strftime("%Y%m%d-%H%M%S")
            self.path.rename(self.path.with_name(f"{self.path.stem}-{ts}{self.path.suffix}"))

    def append(self, event: str, **fields: Any) -> None:
        if self.path is None:
            return
        rec: Dict[str, Any] = {"ts": time.time(), "event": event}
        rec.update(fields)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._rotate_if_needed()
            with self.path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(rec, ensure_ascii=False, default=str) + "\n")
        except OSError as e:
            log.warning(f"audit write failed: {e}")
