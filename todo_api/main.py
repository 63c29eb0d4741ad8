import logging
import time
from typing import Optional

from fastapi import FastAPI, Request

from todo_api.config import Settings, load_settings
from todo_api.database import Database
from todo_api.errors import register_error_handlers
from todo_api.logging_conf import setup_logging
from todo_api.pipeline import default_pipeline
from todo_api.routers import auth, todos, users
from todo_api.utils.guard import AuthGuard

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """Build the application.

    Serve with ``uvicorn --factory todo_api.main:create_app``; configuration
    comes from the environment unless ``settings`` is given.
    """
    settings = settings or load_settings()
    setup_logging(settings.log_level)

    db = database or Database(settings.database_url)
    db.create_all()

    app = FastAPI(title="Todo API")
    app.state.settings = settings
    app.state.db = db
    app.state.auth_pipeline = default_pipeline(AuthGuard(settings.secret_key))

    register_error_handlers(app)

    @app.middleware("http")
    async def request_timer(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        logger.debug("%s %s -> %s (%.3fs)", request.method, request.url.path, response.status_code, elapsed)
        return response

    # API routers
    app.include_router(auth.router)
    app.include_router(todos.router)
    app.include_router(users.router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    logger.info("todo api ready (database=%s)", db.engine.url.render_as_string(hide_password=True))
    return app
