from datetime import datetime
from pydantic import BaseModel, validator
from typing import Optional


class TodoCreate(BaseModel):
    item: str
    completed: bool = False

    @validator("item")
    def item_not_empty(cls, v):
        if not v.strip():
            raise ValueError("item cannot be empty")
        return v.strip()


class TodoUpdate(BaseModel):
    """Partial update.

    An absent or empty ``item`` keeps the stored text; ``completed`` is only
    written when present, so an explicit ``false`` still overwrites.
    """

    item: Optional[str] = None
    completed: Optional[bool] = None

    @validator("item")
    def blank_item_means_unchanged(cls, v):
        if v is None or not v.strip():
            return None
        return v.strip()

    def changes(self) -> dict:
        values = {}
        if self.item is not None:
            values["item"] = self.item
        if self.completed is not None:
            values["completed"] = self.completed
        return values


class TodoOut(BaseModel):
    id: int
    item: str
    completed: bool
    user_id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
