"""Single-file local state persistence."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..models import BoardState

logger = logging.getLogger(__name__)


class LocalStateFile:
    """
    Stores the whole board as one YAML document.

    Read once at startup, rewritten after every state change. A missing or
    unreadable file is treated as "no saved state".
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> BoardState | None:
        """Load saved state, or None if absent or unreadable."""
        if not self.path.exists():
            return None

        try:
            with self.path.open() as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.error("Failed to load state from %s: %s", self.path, e)
            return None

        if not data:
            return None

        try:
            return BoardState.model_validate(data)
        except ValidationError as e:
            logger.error("Invalid state file %s: %s", self.path, e)
            return None

    def save(self, state: BoardState) -> None:
        """Write state to disk. Errors are logged, never raised."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            with tmp_path.open("w") as f:
                yaml.safe_dump(
                    state.model_dump(mode="json"),
                    f,
                    sort_keys=False,
                    allow_unicode=True,
                )
            tmp_path.replace(self.path)
        except OSError as e:
            logger.error("Failed to save state to %s: %s", self.path, e)
