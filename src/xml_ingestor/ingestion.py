# xml-ingestor/src/xml_ingestor/ingestion.py
from __future__ import annotations

from typing import Callable, Iterable, Optional

from .audit import AuditLog
from .config import HandlerConfig
from .decoder import decode
from .errors import IngestError
from .logging_cfg import get_logger
from .models import BatchReport, CreationNotification, ItemFailure, StoredObject
from .sink import DocumentSink
from .slack import SlackClient
from .store import ObjectStore

log = get_logger(__name__)

BUDGET_EXCEEDED = "BUDGET_EXCEEDED"
UNEXPECTED = "UNEXPECTED_ERROR"


class IngestionHandler:
    """
    Consumes a batch of creation notifications: fetch, decode, deliver.

    Notifications are handled one after another in delivery order. A failure
    ends processing for that notification only; it is reported and the batch
    moves on. Nothing is remembered between calls, so a redelivered batch is
    simply processed again.
    """

    def __init__(
        self,
        config: HandlerConfig,
        store: ObjectStore,
        sink: DocumentSink,
        notifier: Optional[SlackClient] = None,
        audit: Optional[AuditLog] = None,
    ) -> None:
        self.config = config
        self.store = store
        self.sink = sink
        self.notifier = notifier or SlackClient()
        self.audit = audit or AuditLog()

    def handle(
        self,
        notifications: Iterable[CreationNotification],
        remaining_ms: Optional[Callable[[], int]] = None,
    ) -> BatchReport:
        pending = list(notifications)
        report = BatchReport(received=len(pending))

        for i, note in enumerate(pending):
            if remaining_ms is not None and remaining_ms() < self.config.min_remaining_ms:
                log.warning(f"time budget nearly spent, leaving {len(pending) - i} notification(s) for redelivery")
                for left in pending[i:]:
                    self._fail(report, left, BUDGET_EXCEEDED, "invocation time budget exceeded")
                break

            if not note.is_creation:
                log.info(f"skipping {note.event_name} for {note.container}/{note.key}")
                report.skipped += 1
                continue

            try:
                self._process(note)
            except IngestError as e:
                self._fail(report, note, e.code, e.message)
            except Exception as e:
                log.exception(f"unexpected error on {note.container}/{note.key}")
                self._fail(report, note, UNEXPECTED, str(e))
            else:
                report.delivered += 1

        log.info(
            f"batch done: received={report.received} delivered={report.delivered} "
            f"skipped={report.skipped} failed={len(report.failures)}"
        )
        return report

    def resolve(self, note: CreationNotification) -> StoredObject:
        container = self.config.target_container or note.container
        if container != note.container:
            log.debug(f"notification names bucket {note.container}, reading from {container}")
        return StoredObject(container=container, key=note.key)

    def _process(self, note: CreationNotification) -> None:
        location = self.resolve(note)
        log.info(f"event {note.event_name}: fetching {location.uri}")
        data = self.store.get(location.container, location.key)
        document = decode(data)
        self.sink.deliver(location, document)
        self.audit.append("delivered", container=location.container, key=location.key, root=document.tag)

    def _fail(self, report: BatchReport, note: CreationNotification, code: str, message: str) -> None:
        location = self.resolve(note)
        failure = ItemFailure(
            container=location.container,
            key=location.key,
            sequence_number=note.sequence_number,
            code=code,
            message=message,
        )
        report.failures.append(failure)
        log.error(f"{code} for {location.uri}: {message}")
        self.audit.append("failed", container=location.container, key=location.key, code=code, message=message)
        self.notifier.error(code, failure.model_dump())
