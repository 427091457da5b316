from typing import Optional

from fastapi import Header

from api import state
from api.backend import BackendAPI


def get_backend() -> BackendAPI:
    return state.backend


def get_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Authentication happens upstream; the caller's id arrives in X-User-Id."""
    return (x_user_id or "").strip() or state.DEFAULT_USER_ID
