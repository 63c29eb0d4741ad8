from datetime import datetime, UTC
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from todo_api.database import MAX_ID
from todo_api.models.todo import Todo


class TodoRepository:
    """Todo store where every lookup is keyed by (todo id, owner id).

    A todo that does not exist, belongs to someone else, was soft-deleted, or
    has an id no row could carry comes back as None/False the same way.
    """

    def __init__(self, db: Session):
        self.db = db

    def _owned(self, user_id: int):
        return (Todo.user_id == user_id, Todo.deleted_at.is_(None))

    def create(self, user_id: int, item: str, completed: bool = False) -> Todo:
        todo = Todo(item=item, completed=completed, user_id=user_id)
        self.db.add(todo)
        self.db.commit()
        self.db.refresh(todo)
        return todo

    def list(self, user_id: int) -> list[Todo]:
        stmt = select(Todo).where(*self._owned(user_id)).order_by(Todo.id)
        return list(self.db.scalars(stmt).all())

    def get(self, todo_id: int, user_id: int) -> Optional[Todo]:
        if not 1 <= todo_id <= MAX_ID:
            return None
        stmt = select(Todo).where(Todo.id == todo_id, *self._owned(user_id))
        return self.db.scalars(stmt).first()

    def update(self, todo_id: int, user_id: int, values: dict) -> Optional[Todo]:
        """Apply ``values`` with one filtered UPDATE and return the fresh row."""
        if not 1 <= todo_id <= MAX_ID:
            return None
        if not values:
            return self.get(todo_id, user_id)
        res = self.db.execute(
            update(Todo)
            .where(Todo.id == todo_id, *self._owned(user_id))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if not res.rowcount:
            self.db.rollback()
            return None
        self.db.commit()
        return self.get(todo_id, user_id)

    def soft_delete(self, todo_id: int, user_id: int) -> bool:
        if not 1 <= todo_id <= MAX_ID:
            return False
        res = self.db.execute(
            update(Todo)
            .where(Todo.id == todo_id, *self._owned(user_id))
            .values(deleted_at=datetime.now(UTC))
            .execution_options(synchronize_session=False)
        )
        if not res.rowcount:
            self.db.rollback()
            return False
        self.db.commit()
        return True
