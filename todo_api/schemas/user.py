from datetime import datetime
from pydantic import BaseModel, validator, EmailStr


def _check_password(v: str) -> str:
    if not v:
        raise ValueError("password cannot be empty")
    if len(v.encode("utf-8")) > 72:
        raise ValueError("password too long: must be at most 72 bytes when UTF-8 encoded")
    return v


class UserRegister(BaseModel):
    username: str
    email: EmailStr
    password: str

    @validator("username")
    def username_not_empty(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("username cannot be empty")
        if len(v) > 64:
            raise ValueError("username too long: must be at most 64 characters")
        return v

    @validator("password")
    def password_max_bytes(cls, v: str) -> str:
        """Ensure password does not exceed bcrypt's 72-byte limit when UTF-8 encoded.

        Raise a validation error so the API returns a 400 with a clear message.
        """
        return _check_password(v)


class UserLogin(BaseModel):
    email: EmailStr
    password: str

    @validator("password")
    def password_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("password cannot be empty")
        return v


class RegisterOut(BaseModel):
    user_id: int
    username: str


class LoginOut(BaseModel):
    token: str
    user_id: int


class UserOut(BaseModel):
    id: int
    username: str
    email: EmailStr
    created_at: datetime

    class Config:
        from_attributes = True
