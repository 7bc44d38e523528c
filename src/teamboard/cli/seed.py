"""Seed command: install the default records into the remote store."""

import logging

from ..config import Settings
from ..repositories import LocalStateFile, RecordStoreError, RecordStoreProtocol, RestRecordStore
from ..services import EntityStore
from ..sync import RemoteMirror
from .output import error, header, info, success

logger = logging.getLogger(__name__)


def run_seed(settings: Settings, record_store: RecordStoreProtocol | None = None) -> int:
    """
    Load the board and seed default people, sprint and items if it is empty.

    Writes go through the mirror inline so failures are reported before exit.

    Returns:
        Exit code (0 = success, 1 = error)
    """
    record_store = record_store or RestRecordStore.from_settings(settings)
    state_file = LocalStateFile(settings.state_file) if settings.state_file else None

    if record_store is None and state_file is None:
        error("Nothing to seed: configure TEAMBOARD_REMOTE_URL/KEY or pass --state-file")
        return 1

    mirror = RemoteMirror(
        record_store,
        max_retries=settings.sync_retries,
        retry_delay=settings.sync_retry_delay,
        background=False,
    )
    store = EntityStore(mirror, state_file)

    header("Seeding teamboard")
    try:
        if record_store is not None:
            info("Reading remote store...")
            store.load_remote(record_store)
        else:
            store.load_local()
    except RecordStoreError as e:
        logger.error("Seed failed: %s", e)
        error(f"Could not read remote store: {e}")
        store.close()
        return 1

    store.close()

    if mirror.dropped_count:
        error(f"{mirror.dropped_count} record(s) could not be written")
        return 1

    snapshot = store.snapshot()
    success(
        f"Board ready: {len(snapshot.work_items)} items, "
        f"{len(snapshot.people)} people, {len(snapshot.sprints)} sprints"
    )
    return 0
