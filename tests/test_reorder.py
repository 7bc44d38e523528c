"""Tests for drag-and-drop reordering."""

import pytest

from teamboard.models import BoardState, WorkItem
from teamboard.services import DragPhase, DragReorderEngine, EntityStore, reorder_ids
from teamboard.sync import RemoteMirror
from teamboard.repositories import InMemoryRecordStore


@pytest.fixture
def remote() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def store(remote: InMemoryRecordStore) -> EntityStore:
    store = EntityStore(RemoteMirror(remote, background=False))
    store.load_state(
        BoardState(
            work_items=[
                WorkItem(id="A", title="A", created_at=1),
                WorkItem(id="B", title="B", created_at=2),
                WorkItem(id="C", title="C", created_at=3),
            ]
        )
    )
    return store


@pytest.fixture
def engine(store: EntityStore) -> DragReorderEngine:
    return DragReorderEngine(store)


def orders(store: EntityStore) -> dict[str, int | None]:
    return {i.id: i.order for i in store.work_items}


class TestReorderIds:
    """Tests for the pure reorder function."""

    def test_drop_before_target(self):
        assert reorder_ids(["A", "B", "C"], "A", "C") == ["B", "A", "C"]

    def test_move_up(self):
        assert reorder_ids(["A", "B", "C"], "C", "A") == ["C", "A", "B"]

    def test_same_id_noop(self):
        assert reorder_ids(["A", "B"], "A", "A") is None

    def test_unknown_ids_noop(self):
        assert reorder_ids(["A", "B"], "X", "A") is None
        assert reorder_ids(["A", "B"], "A", "X") is None


class TestDragReorderEngine:
    """Tests for the drag state machine."""

    def test_full_gesture(self, engine: DragReorderEngine, store: EntityStore):
        engine.drag_start("A")
        assert engine.phase is DragPhase.DRAGGING
        engine.drag_enter("C")
        assert engine.phase is DragPhase.HOVERING

        result = engine.drop("C", ["A", "B", "C"])

        assert result == ["B", "A", "C"]
        assert orders(store) == {"A": 1, "B": 0, "C": 2}
        assert engine.phase is DragPhase.IDLE
        assert engine.source_id is None

    def test_drag_leave_returns_to_dragging(self, engine: DragReorderEngine):
        engine.drag_start("A")
        engine.drag_enter("B")
        engine.drag_leave()
        assert engine.phase is DragPhase.DRAGGING
        assert engine.target_id is None

    def test_enter_self_ignored(self, engine: DragReorderEngine):
        engine.drag_start("A")
        engine.drag_enter("A")
        assert engine.phase is DragPhase.DRAGGING

    def test_drop_without_drag(self, engine: DragReorderEngine, store: EntityStore):
        assert engine.drop("B", ["A", "B", "C"]) is None
        assert orders(store) == {"A": None, "B": None, "C": None}

    def test_drop_on_self_resets(self, engine: DragReorderEngine):
        engine.drag_start("A")
        assert engine.drop("A", ["A", "B"]) is None
        assert engine.phase is DragPhase.IDLE

    def test_drag_end_cancels(self, engine: DragReorderEngine):
        engine.drag_start("A")
        engine.drag_end()
        assert engine.phase is DragPhase.IDLE
        assert engine.drop("B", ["A", "B"]) is None

    def test_only_changed_orders_written(
        self, engine: DragReorderEngine, store: EntityStore, remote: InMemoryRecordStore
    ):
        engine.apply_order(["A", "B", "C"])
        writes: list[str] = []
        original = remote.upsert

        def record_upsert(table, record):
            writes.append(record["id"])
            original(table, record)

        remote.upsert = record_upsert

        # A after B: only A and B change
        changed = engine.apply_order(["B", "A", "C"])

        assert changed == 2
        assert sorted(writes) == ["A", "B"]

    def test_view_local_order(self, engine: DragReorderEngine, store: EntityStore):
        # C is hidden by a filter; it keeps its value
        store.update_work_item("C", order=7)
        engine.move("B", "A", ["A", "B"])
        assert orders(store) == {"A": 1, "B": 0, "C": 7}

    def test_move_is_one_gesture(self, engine: DragReorderEngine, store: EntityStore):
        result = engine.move("C", "A", ["A", "B", "C"])
        assert result == ["C", "A", "B"]
        assert engine.phase is DragPhase.IDLE

    def test_children_never_ordered(self, engine: DragReorderEngine, store: EntityStore):
        child = store.add_work_item("Child", parent_id="A")
        assert engine.apply_order(["A", child.id]) == 1
        assert store.get_work_item(child.id).order is None
