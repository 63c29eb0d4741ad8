import os
from dataclasses import dataclass

# Only HS256 tokens are issued or accepted
ALGORITHM = "HS256"


class ConfigError(RuntimeError):
    """Raised at startup when required configuration is missing."""


@dataclass(frozen=True)
class Settings:
    secret_key: str
    access_token_expire_minutes: float = 24 * 60
    # Default to local SQLite for dev/tests; override via env in Docker/Prod
    database_url: str = "sqlite:///./todo_api.db"
    log_level: str = "INFO"


def load_settings() -> Settings:
    secret = os.environ.get("JWT_SECRET", "").strip()
    if not secret:
        raise ConfigError("JWT_SECRET is not set; refusing to start without a signing secret")
    return Settings(
        secret_key=secret,
        access_token_expire_minutes=float(os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES", 24 * 60)),
        database_url=os.environ.get("DATABASE_URL", "sqlite:///./todo_api.db"),
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
    )
