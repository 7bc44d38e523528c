"""In-memory record store for demos and tests."""

from copy import deepcopy

from .protocol import Record


class InMemoryRecordStore:
    """RecordStoreProtocol backed by dicts, preserving insertion order."""

    def __init__(self) -> None:
        self._tables: dict[str, dict[str, Record]] = {}
        self.closed = False

    def upsert(self, table: str, record: Record) -> None:
        self._tables.setdefault(table, {})[record["id"]] = deepcopy(record)

    def delete(self, table: str, record_id: str) -> None:
        self._tables.get(table, {}).pop(record_id, None)

    def select(self, table: str, order_by: str | None = None) -> list[Record]:
        records = [deepcopy(r) for r in self._tables.get(table, {}).values()]
        if order_by:
            # Missing values sort first, like NULLS FIRST
            records.sort(key=lambda r: (r.get(order_by) is not None, r.get(order_by) or 0))
        return records

    def get(self, table: str, record_id: str) -> Record | None:
        record = self._tables.get(table, {}).get(record_id)
        return deepcopy(record) if record is not None else None

    def count(self, table: str) -> int:
        return len(self._tables.get(table, {}))

    def close(self) -> None:
        self.closed = True
