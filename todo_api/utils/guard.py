"""Bearer token verification.

``AuthGuard.authenticate`` walks a fixed sequence of checks and ends in
exactly one of two outcomes: ``Authorized(user_id)`` or ``Rejected(reason)``.
It never touches the database.
"""
from dataclasses import dataclass
from enum import Enum
import json
import time
from typing import Callable, Optional, Union

from jose import jws
from jose.exceptions import JOSEError
from pydantic import BaseModel, StrictInt, StrictStr, validator
from pydantic import ValidationError as ClaimsValidationError

from todo_api.config import ALGORITHM
from todo_api.database import MAX_ID


class RejectReason(str, Enum):
    MISSING_OR_MALFORMED_HEADER = "missing_or_malformed_header"
    BAD_SIGNATURE = "bad_signature"
    MALFORMED_CLAIMS = "malformed_claims"
    EXPIRED = "expired"
    UNKNOWN_SUBJECT = "unknown_subject"


# Client-facing messages per rejection reason
REJECT_DETAIL = {
    RejectReason.MISSING_OR_MALFORMED_HEADER: "Authorization header missing or invalid",
    RejectReason.BAD_SIGNATURE: "Invalid token",
    RejectReason.MALFORMED_CLAIMS: "Invalid token claims",
    RejectReason.EXPIRED: "Token has expired",
    RejectReason.UNKNOWN_SUBJECT: "Invalid token",
}


@dataclass(frozen=True)
class Authorized:
    user_id: int


@dataclass(frozen=True)
class Rejected:
    reason: RejectReason


AuthOutcome = Union[Authorized, Rejected]


class TokenClaims(BaseModel):
    sub: StrictStr
    exp: StrictInt

    @validator("sub")
    def sub_is_user_id(cls, v):
        if not (v.isascii() and v.isdigit()) or not 1 <= int(v) <= MAX_ID:
            raise ValueError("sub must be a positive integer user id")
        return v

    @property
    def user_id(self) -> int:
        return int(self.sub)


def extract_bearer(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an ``Authorization: Bearer <token>`` header value."""
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


def decode_claims(payload: bytes) -> Optional[TokenClaims]:
    try:
        data = json.loads(payload)
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    try:
        return TokenClaims.model_validate(data)
    except ClaimsValidationError:
        return None


class AuthGuard:
    def __init__(self, secret_key: str, clock: Callable[[], float] = time.time):
        self.secret_key = secret_key
        self.clock = clock

    def authenticate(self, authorization: Optional[str]) -> AuthOutcome:
        token = extract_bearer(authorization)
        if token is None:
            return Rejected(RejectReason.MISSING_OR_MALFORMED_HEADER)

        # the algorithm allow-list is what rejects "none" and asymmetric substitution
        try:
            payload = jws.verify(token, self.secret_key, algorithms=[ALGORITHM])
        except JOSEError:
            return Rejected(RejectReason.BAD_SIGNATURE)

        claims = decode_claims(payload)
        if claims is None:
            return Rejected(RejectReason.MALFORMED_CLAIMS)

        if self.clock() > claims.exp:
            return Rejected(RejectReason.EXPIRED)

        return Authorized(claims.user_id)
