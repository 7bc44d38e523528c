"""Free-form boards and their sticky notes."""

from pydantic import BaseModel

DEFAULT_NOTE_COLOR = "yellow"


class Board(BaseModel):
    """A canvas that owns a set of notes."""

    id: str
    name: str
    created_at: int


class BoardNote(BaseModel):
    """A sticky note positioned on a board."""

    id: str
    board_id: str
    title: str
    content: str = ""
    color: str = DEFAULT_NOTE_COLOR
    x: float = 0
    y: float = 0
    created_at: int
