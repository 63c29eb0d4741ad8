"""Request interceptors for protected routes.

Protected handlers depend on ``require_user``, which runs the app's ordered
interceptor list. Each interceptor returns ``Continue`` with a (possibly
enriched) context or ``ShortCircuit`` with the error to answer with; the first
short-circuit stops the pipeline and the handler never runs.
"""
from dataclasses import dataclass, replace
import logging
from typing import Callable, Optional, Sequence, Union

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from todo_api.database import get_db
from todo_api.errors import APIError, AuthenticationError
from todo_api.repositories.user_repo import UserRepository
from todo_api.utils.guard import REJECT_DETAIL, AuthGuard, Rejected, RejectReason

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestContext:
    request: Request
    db: Session
    user_id: Optional[int] = None


@dataclass(frozen=True)
class Continue:
    context: RequestContext


@dataclass(frozen=True)
class ShortCircuit:
    error: APIError


Interceptor = Callable[[RequestContext], Union[Continue, ShortCircuit]]


def _reject(ctx: RequestContext, reason: RejectReason) -> ShortCircuit:
    logger.info("auth rejected: %s on %s %s", reason.value, ctx.request.method, ctx.request.url.path)
    return ShortCircuit(AuthenticationError(REJECT_DETAIL[reason]))


class BearerTokenInterceptor:
    """Verifies the bearer token and puts its subject on the context."""

    def __init__(self, guard: AuthGuard):
        self.guard = guard

    def __call__(self, ctx: RequestContext) -> Union[Continue, ShortCircuit]:
        outcome = self.guard.authenticate(ctx.request.headers.get("Authorization"))
        if isinstance(outcome, Rejected):
            return _reject(ctx, outcome.reason)
        return Continue(replace(ctx, user_id=outcome.user_id))


class ActiveSubjectInterceptor:
    """Rejects tokens whose subject no longer exists or was soft-deleted."""

    def __call__(self, ctx: RequestContext) -> Union[Continue, ShortCircuit]:
        if ctx.user_id is None or not UserRepository(ctx.db).exists(ctx.user_id):
            return _reject(ctx, RejectReason.UNKNOWN_SUBJECT)
        return Continue(ctx)


def default_pipeline(guard: AuthGuard) -> list:
    return [BearerTokenInterceptor(guard), ActiveSubjectInterceptor()]


def run_pipeline(interceptors: Sequence[Interceptor], ctx: RequestContext) -> Union[Continue, ShortCircuit]:
    for interceptor in interceptors:
        result = interceptor(ctx)
        if isinstance(result, ShortCircuit):
            return result
        ctx = result.context
    return Continue(ctx)


def require_user(request: Request, db: Session = Depends(get_db)) -> int:
    """FastAPI dependency: the authenticated user id, or a 401."""
    result = run_pipeline(request.app.state.auth_pipeline, RequestContext(request=request, db=db))
    if isinstance(result, ShortCircuit):
        raise result.error
    request.state.user_id = result.context.user_id
    return result.context.user_id
