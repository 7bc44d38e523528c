"""Record store protocol for remote persistence backends."""

from typing import Any, Protocol

Record = dict[str, Any]

TABLES = (
    "people",
    "sprints",
    "work_items",
    "comments",
    "boards",
    "board_notes",
    "announcements",
)


class RecordStoreProtocol(Protocol):
    """Interface for keyed record stores.

    A record store holds flat records (column name -> JSON value) in named
    tables, keyed by an ``id`` column. Implementations include:
    - RestRecordStore (PostgREST / Supabase over HTTP)
    - InMemoryRecordStore (demos and tests)
    """

    def upsert(self, table: str, record: Record) -> None:
        """Insert the record, or replace the existing one with the same id.

        Args:
            table: Table name, one of TABLES.
            record: Fully populated flat record, including ``id``.
        """
        ...

    def delete(self, table: str, record_id: str) -> None:
        """Delete a record by id.

        Note:
            Does not raise an error if the record doesn't exist.
        """
        ...

    def select(self, table: str, order_by: str | None = None) -> list[Record]:
        """Return every record of a table.

        Args:
            table: Table name.
            order_by: Optional column to sort ascending by.
        """
        ...

    def close(self) -> None:
        """Release any held resources."""
        ...
