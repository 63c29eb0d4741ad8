"""Logging setup for the service.

Idempotent: calling setup_logging() multiple times won't duplicate handlers.
"""
import logging
import sys

LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s - %(message)s"


def setup_logging(level="INFO") -> None:
    """Configure the root logger and align uvicorn's loggers with it."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger()
    if root.handlers:  # Prevent double configuration under reload / tests
        return

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.setLevel(level)
    root.addHandler(handler)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        lg = logging.getLogger(name)
        lg.setLevel(level)
        lg.propagate = True
        for h in list(lg.handlers):
            lg.removeHandler(h)
    for noisy in ("passlib", "httpx"):
        logging.getLogger(noisy).setLevel(logging.ERROR)
