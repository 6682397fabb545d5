from __future__ import annotations

import bcrypt

from ..storage.models import User
from ..storage.repository import EventStore


def hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def authenticate(store: EventStore, username: str, password: str) -> User | None:
    """Verify credentials against the store. Returns the user or ``None``."""
    user = store.get_user_by_username(username)
    if user and verify_password(password, user.password_hash):
        return user
    return None
