from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base, Session
from fastapi import Request

Base = declarative_base()

# Largest primary key the 64-bit integer columns can hold
MAX_ID = 2**63 - 1


class Database:
    """Engine and session factory for one application instance.

    Built once by ``create_app`` and kept on ``app.state.db``; handlers get a
    per-request session through ``get_db``.
    """

    def __init__(self, url: str):
        # Only apply sqlite-specific connect_args when using sqlite
        connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}

        # Enable pool_pre_ping to avoid stale connections (useful for cloud DBs like Neon)
        self.engine = create_engine(
            url,
            connect_args=connect_args,
            pool_pre_ping=True,
        )
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_all(self):
        # models must be imported so their tables are registered on Base.metadata
        from todo_api.models import todo, user  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def drop_all(self):
        Base.metadata.drop_all(bind=self.engine)

    def session(self) -> Session:
        return self.SessionLocal()

    def dispose(self):
        self.engine.dispose()


def get_db(request: Request):
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()
