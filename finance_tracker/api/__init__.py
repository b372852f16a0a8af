"""HTTP API package."""

from finance_tracker.api.app import create_app, register_exception_handlers, run

__all__ = [
    "create_app",
    "register_exception_handlers",
    "run",
]
