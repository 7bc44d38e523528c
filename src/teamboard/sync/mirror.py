"""Outbound queue that mirrors local changes to the remote store."""

from __future__ import annotations

import logging
import queue
import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Literal

from ..repositories.protocol import Record, RecordStoreProtocol
from ..repositories.rest import RecordStoreError

logger = logging.getLogger(__name__)

Operation = Literal["upsert", "delete"]

# Most recent dropped writes kept for inspection
DROPPED_HISTORY = 100


@dataclass(frozen=True)
class OutboundTask:
    """One pending remote write."""

    operation: Operation
    table: str
    record_id: str
    record: Record | None = None

    def describe(self) -> str:
        return f"{self.operation} {self.table}/{self.record_id}"


class RemoteMirror:
    """Best-effort, non-blocking mirror of local writes.

    Callers enqueue upserts and deletes; a single worker thread applies them
    in FIFO order. Failed writes are retried ``max_retries`` times, then
    logged and dropped. Local state is never rolled back.

    With no store configured every call is a successful no-op, which keeps
    the board usable in local-only mode.
    """

    def __init__(
        self,
        store: RecordStoreProtocol | None,
        max_retries: int = 3,
        retry_delay: float = 0.5,
        background: bool = True,
    ) -> None:
        self.store = store
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.background = background

        self.dropped: deque[OutboundTask] = deque(maxlen=DROPPED_HISTORY)
        self.dropped_count = 0
        self._queue: queue.Queue[OutboundTask | None] = queue.Queue()
        self._worker: threading.Thread | None = None
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        """Whether writes go anywhere."""
        return self.store is not None

    @property
    def pending(self) -> int:
        """Approximate number of queued writes."""
        return self._queue.qsize()

    # --- Public API ---

    def upsert(self, table: str, record: Record) -> None:
        """Queue an insert-or-replace of a full record."""
        self._submit(OutboundTask("upsert", table, str(record["id"]), dict(record)))

    def delete(self, table: str, record_id: str) -> None:
        """Queue a delete by id."""
        self._submit(OutboundTask("delete", table, record_id))

    def flush(self) -> None:
        """Block until every queued write has been attempted."""
        if self._worker is not None:
            self._queue.join()

    def close(self) -> None:
        """Drain the queue, stop the worker and close the store."""
        worker = self._worker
        if worker is not None:
            self._queue.put(None)
            worker.join()
            self._worker = None
        if self.store is not None:
            self.store.close()

    # --- Internals ---

    def _submit(self, task: OutboundTask) -> None:
        if self.store is None:
            logger.debug("Remote store not configured, skipping %s", task.describe())
            return

        if not self.background:
            self._run(task)
            return

        self._ensure_worker()
        self._queue.put(task)
        logger.debug("Queued %s", task.describe())

    def _ensure_worker(self) -> None:
        with self._lock:
            if self._worker is None or not self._worker.is_alive():
                self._worker = threading.Thread(
                    target=self._drain, name="teamboard-mirror", daemon=True
                )
                self._worker.start()

    def _drain(self) -> None:
        while True:
            task = self._queue.get()
            try:
                if task is None:
                    return
                self._run(task)
            finally:
                self._queue.task_done()

    def _run(self, task: OutboundTask) -> bool:
        """Apply one task with retries. Returns True on success."""
        attempts = self.max_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                self._apply(task)
            except RecordStoreError as e:
                if attempt < attempts:
                    logger.warning(
                        "Remote %s failed (attempt %d/%d): %s",
                        task.describe(),
                        attempt,
                        attempts,
                        e,
                    )
                    if self.retry_delay:
                        time.sleep(self.retry_delay)
                    continue
                logger.error("Remote %s dropped after %d attempts: %s", task.describe(), attempts, e)
            except Exception:
                logger.exception("Remote %s failed unexpectedly", task.describe())
            else:
                logger.debug("Remote %s ok", task.describe())
                return True

            with self._lock:
                self.dropped.append(task)
                self.dropped_count += 1
            return False
        return False

    def _apply(self, task: OutboundTask) -> None:
        assert self.store is not None
        if task.operation == "upsert":
            assert task.record is not None
            self.store.upsert(task.table, task.record)
        else:
            self.store.delete(task.table, task.record_id)
