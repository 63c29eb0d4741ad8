import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from todo_api.database import get_db
from todo_api.errors import AuthenticationError, InternalFault, ValidationError
from todo_api.repositories.user_repo import UserRepository
from todo_api.schemas.user import LoginOut, RegisterOut, UserLogin, UserRegister
from todo_api.utils.auth import create_token, dummy_verify, hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

INVALID_CREDENTIALS = "Invalid email or password"


@router.post("/register", response_model=RegisterOut, status_code=201)
def register(user: UserRegister, db: Session = Depends(get_db)):
    try:
        hashed = hash_password(user.password)
    except ValueError as e:
        # map hashing/validation errors to a 400 so client gets a clear message
        raise ValidationError(str(e))

    new_user = UserRepository(db).create(user.username, user.email, hashed)
    logger.info("registered user %s (id=%s)", new_user.username, new_user.id)
    return {"user_id": new_user.id, "username": new_user.username}


@router.post("/login", response_model=LoginOut)
def login(user: UserLogin, request: Request, db: Session = Depends(get_db)):
    db_user = UserRepository(db).get_by_email(user.email)
    if db_user is None:
        dummy_verify()
        logger.info("login failed: unknown email")
        raise AuthenticationError(INVALID_CREDENTIALS)

    try:
        ok = verify_password(user.password, db_user.password)
    except ValueError as e:
        raise InternalFault(f"stored password hash for user {db_user.id} is unreadable") from e
    if not ok:
        logger.info("login failed: bad password for user %s", db_user.id)
        raise AuthenticationError(INVALID_CREDENTIALS)

    token = create_token(db_user.id, request.app.state.settings)
    logger.info("login: user %s", db_user.id)
    return {"token": token, "user_id": db_user.id}
