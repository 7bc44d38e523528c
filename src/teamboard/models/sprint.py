"""Sprint model."""

from pydantic import BaseModel, model_validator

from ..utils.datetime import DAY_MS

SPRINT_LENGTH_DAYS = 14
SPRINT_LENGTH_MS = SPRINT_LENGTH_DAYS * DAY_MS


class Sprint(BaseModel):
    """A fixed-length, time-boxed container for work items."""

    id: str
    name: str
    is_active: bool = False
    start_date: int
    end_date: int = 0  # Always start_date + SPRINT_LENGTH_MS

    @model_validator(mode="after")
    def _derive_end_date(self) -> "Sprint":
        self.end_date = self.start_date + SPRINT_LENGTH_MS
        return self
