import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from todo_api.database import get_db
from todo_api.errors import AuthenticationError
from todo_api.pipeline import require_user
from todo_api.repositories.user_repo import UserRepository
from todo_api.schemas.user import UserOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserOut)
def read_me(user_id: int = Depends(require_user), db: Session = Depends(get_db)):
    user = UserRepository(db).get(user_id)
    if user is None:
        raise AuthenticationError("Invalid token")
    return user


@router.delete("/me", status_code=204)
def delete_me(user_id: int = Depends(require_user), db: Session = Depends(get_db)):
    """Soft-delete the caller's account and todos; their tokens stop working immediately."""
    if not UserRepository(db).soft_delete(user_id):
        raise AuthenticationError("Invalid token")
    logger.info("user %s deleted their account", user_id)
