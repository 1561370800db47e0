"""Registration, login, logout and the user list."""

from fastapi import APIRouter, Depends

from ordo_manager import queries, transitions
from ordo_manager.store import Store

from .deps import dump_user, get_store, raise_for, require_gm
from .models import LoginBody, RegisterBody

router = APIRouter()


@router.post("/auth/register", status_code=201)
async def register(body: RegisterBody, store: Store = Depends(get_store)):
    """Create a profile and log in as it."""
    outcome = store.dispatch(
        transitions.register, body.name, body.password, body.confirm_password, body.role,
    )
    raise_for(outcome)
    return dump_user(outcome.state.current_user)


@router.post("/auth/login")
async def login(body: LoginBody, store: Store = Depends(get_store)):
    outcome = store.dispatch(transitions.login, body.name, body.password)
    raise_for(outcome)
    return dump_user(outcome.state.current_user)


@router.post("/auth/logout")
async def logout(store: Store = Depends(get_store)):
    store.dispatch(transitions.logout)
    return {"ok": True}


@router.get("/users")
async def list_users(store: Store = Depends(get_store)):
    """Known profiles, for the quick-select list on the login screen."""
    return [dump_user(u) for u in store.state.users]


@router.get("/users/players")
async def list_players(store: Store = Depends(get_store)):
    """Player profiles a GM can hand characters to."""
    require_gm(store)
    return [dump_user(u) for u in queries.players(store.state)]
