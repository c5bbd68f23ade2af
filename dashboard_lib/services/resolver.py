from typing import Any
from fastapi import HTTPException
from starlette.requests import Request


def resolve_service(request: Request, name: str) -> Any:
    """Resolve a named service from the application's service container.

    Requires `app.state.container` to exist and hold the named
    registration, otherwise an HTTP 500 is raised.
    """
    container = getattr(request.app.state, 'container', None)
    if container is None:
        raise HTTPException(status_code=500, detail="Service container not configured")
    try:
        return container.get(name)
    except KeyError:
        raise HTTPException(status_code=500, detail=f"Service '{name}' not configured")


def resolve_optional_service(request: Request, name: str) -> Any:
    """Resolve an optional service from the container, returning None if not present."""
    container = getattr(request.app.state, 'container', None)
    if container is None:
        return None
    try:
        return container.get(name)
    except KeyError:
        return None
