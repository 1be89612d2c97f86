"""Request dependencies."""

from __future__ import annotations

from fastapi import Request


def get_services(request: Request):
    """Services wired by the application lifespan."""
    return request.app.state.services
