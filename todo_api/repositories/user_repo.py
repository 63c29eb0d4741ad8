from datetime import datetime, UTC
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from todo_api.database import MAX_ID
from todo_api.errors import ConflictError
from todo_api.models.todo import Todo
from todo_api.models.user import User


class UserRepository:
    """Credential store. Soft-deleted users are invisible to every read."""

    def __init__(self, db: Session):
        self.db = db

    def _live(self):
        return select(User).where(User.deleted_at.is_(None))

    def create(self, username: str, email: str, password_hash: str) -> User:
        user = User(username=username, email=email, password=password_hash)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("Email or username already in use")
        self.db.refresh(user)
        return user

    def get(self, user_id: int) -> Optional[User]:
        if not 1 <= user_id <= MAX_ID:
            return None
        return self.db.scalars(self._live().where(User.id == user_id)).first()

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.scalars(self._live().where(User.email == email)).first()

    def exists(self, user_id: int) -> bool:
        return self.get(user_id) is not None

    def soft_delete(self, user_id: int) -> bool:
        """Tombstone the user and all of their live todos in one transaction."""
        now = datetime.now(UTC)
        res = self.db.execute(
            update(User)
            .where(User.id == user_id, User.deleted_at.is_(None))
            .values(deleted_at=now)
            .execution_options(synchronize_session=False)
        )
        if not res.rowcount:
            self.db.rollback()
            return False
        self.db.execute(
            update(Todo)
            .where(Todo.user_id == user_id, Todo.deleted_at.is_(None))
            .values(deleted_at=now)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return True
