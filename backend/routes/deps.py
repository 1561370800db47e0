"""Shared dependencies and helpers for the API routers."""

from typing import Any

from fastapi import HTTPException, Request

from ordo_manager.models import AppState, User, UserRole
from ordo_manager.store import Store
from ordo_manager.transitions import Outcome

_STATUS_BY_KIND = {
    "invalid": 400,
    "unauthorized": 401,
    "forbidden": 403,
    "not_found": 404,
    "conflict": 409,
}


def get_store(request: Request) -> Store:
    return request.app.state.store


def require_user(store: Store) -> User:
    user = store.state.current_user
    if user is None:
        raise HTTPException(401, "Not logged in")
    return user


def require_gm(store: Store) -> User:
    user = require_user(store)
    if user.role != UserRole.GM:
        raise HTTPException(403, "GM only")
    return user


def raise_for(outcome: Outcome) -> None:
    """Turn a rejected Outcome into an HTTPException."""
    if not outcome.ok:
        raise HTTPException(_STATUS_BY_KIND.get(outcome.kind, 400), outcome.error)


def dump_user(user: User | None) -> dict[str, Any] | None:
    """Serialise a user without their password."""
    if user is None:
        return None
    data = user.model_dump(mode="json", by_alias=True, exclude={"password"})
    data["hasPassword"] = user.password is not None
    return data


def dump_state(state: AppState) -> dict[str, Any]:
    data = state.to_dict()
    data["currentUser"] = dump_user(state.current_user)
    data["users"] = [dump_user(u) for u in state.users]
    return data
