"""Request-scoped access to the shared application components."""

from fastapi import Request

from finance_tracker.orchestrator import AppComponents


def get_components(request: Request) -> AppComponents:
    return request.app.state.components
