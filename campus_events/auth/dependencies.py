from __future__ import annotations

from fastapi import Depends, HTTPException, Request

from ..storage.data_store import get_store
from ..storage.models import User
from ..storage.repository import EventStore


def get_current_user(
    request: Request,
    store: EventStore = Depends(get_store),
) -> User | None:
    """Return the logged-in user from the session, or ``None``."""
    user_id = request.session.get("user_id")
    if user_id is None:
        return None
    return store.get_user(user_id)


def require_user(user: User | None = Depends(get_current_user)) -> User:
    """Raise 401 if no user is logged in."""
    if user is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return user
