"""Person model."""

from pydantic import BaseModel


class Person(BaseModel):
    """A team member who can be assigned work or author comments."""

    id: str
    name: str
    handle: str | None = None

    @property
    def display_name(self) -> str:
        if self.handle:
            return f"{self.name} (@{self.handle})"
        return self.name
