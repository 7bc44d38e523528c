"""Tests for the local state file."""

from pathlib import Path

import pytest
import yaml

from teamboard.models import BoardState, Sprint, WorkItem
from teamboard.repositories import LocalStateFile
from teamboard.services import EntityStore


@pytest.fixture
def state_path(tmp_path: Path) -> Path:
    return tmp_path / "state" / "board.yml"


class TestLocalStateFile:
    """Tests for load/save."""

    def test_missing_file(self, state_path: Path):
        assert LocalStateFile(state_path).load() is None

    def test_round_trip(self, state_path: Path):
        state = BoardState(
            work_items=[WorkItem(id="wi-1", title="Item", tags=["Blocker"], order=0, created_at=5)],
            sprints=[Sprint(id="s", name="S", start_date=0, is_active=True)],
        )
        file = LocalStateFile(state_path)
        file.save(state)

        assert file.exists()
        assert file.load() == state

    def test_written_as_yaml(self, state_path: Path):
        LocalStateFile(state_path).save(
            BoardState(work_items=[WorkItem(id="wi-1", title="Item", created_at=5)])
        )
        data = yaml.safe_load(state_path.read_text())
        assert data["work_items"][0]["type"] == "Task"
        assert not state_path.with_suffix(".yml.tmp").exists()

    def test_invalid_yaml(self, state_path: Path):
        state_path.parent.mkdir(parents=True)
        state_path.write_text("work_items: [unclosed")
        assert LocalStateFile(state_path).load() is None

    def test_invalid_shape(self, state_path: Path):
        state_path.parent.mkdir(parents=True)
        state_path.write_text("work_items:\n  - id: wi-1\n")
        assert LocalStateFile(state_path).load() is None

    def test_empty_file(self, state_path: Path):
        state_path.parent.mkdir(parents=True)
        state_path.write_text("")
        assert LocalStateFile(state_path).load() is None


class TestStoreIntegration:
    """The store rewrites the file after every mutation."""

    def test_mutation_persists(self, state_path: Path):
        store = EntityStore(state_file=LocalStateFile(state_path))
        item = store.add_work_item("Saved")

        reloaded = EntityStore(state_file=LocalStateFile(state_path))
        reloaded.load_local(seed_if_empty=False)

        assert reloaded.get_work_item(item.id) == item

    def test_seed_persists(self, state_path: Path):
        store = EntityStore(state_file=LocalStateFile(state_path))
        store.load_local()

        saved = LocalStateFile(state_path).load()
        assert saved is not None
        assert len(saved.work_items) == 6
