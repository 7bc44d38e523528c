"""Announcement model."""

from pydantic import BaseModel


class Announcement(BaseModel):
    """A standalone team announcement."""

    id: str
    title: str
    description: str = ""
    created_at: int
