from datetime import datetime, timedelta, UTC
import logging

from jose import jwt, JWTError
from passlib.context import CryptContext

from todo_api.config import ALGORITHM, Settings
from todo_api.errors import InternalFault

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a password after validating bcrypt's 72-byte limit.

    Raises ValueError if the UTF-8 encoding of the password exceeds 72 bytes.
    """
    if isinstance(password, str):
        b = password.encode("utf-8")
        if len(b) > 72:
            # make the failure explicit and consistent
            raise ValueError("password too long: must be at most 72 bytes when UTF-8 encoded")
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    """Verify a plaintext password against a hash.

    An over-long plaintext is reported as a mismatch. A hash passlib cannot
    identify still raises ValueError, since that is stored data gone bad and
    not a wrong password.
    """
    if len(plain.encode("utf-8")) > 72:
        return False
    return pwd_context.verify(plain, hashed)


def dummy_verify() -> None:
    """Burn one hash verification so unknown-email logins cost the same as wrong passwords."""
    pwd_context.dummy_verify()


def create_token(user_id: int, settings: Settings) -> str:
    """Mint a signed bearer token for ``user_id`` valid for the configured window."""
    if not settings.secret_key:
        raise InternalFault("token signing secret is not configured")
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    claims = {
        "sub": str(user_id),
        "exp": int(expire.timestamp()),  # JWT spec uses Unix timestamp
    }
    try:
        return jwt.encode(claims, settings.secret_key, algorithm=ALGORITHM)
    except JWTError as e:
        raise InternalFault(f"token signing failed: {e}") from e
