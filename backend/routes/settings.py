"""Health check, ruleset registry, and whole-document endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from ordo_manager import queries, transitions
from ordo_manager.store import Store
from ordo_manager.systems import DEFAULT_SYSTEMS, get_system

from .deps import dump_state, get_store, require_gm
from .models import SelectSystemBody

router = APIRouter()


@router.get("/health")
async def health():
    """Health check."""
    return {"status": "ok"}


@router.get("/systems")
async def list_systems():
    """List the built-in rulesets."""
    return DEFAULT_SYSTEMS


@router.get("/state")
async def get_state(store: Store = Depends(get_store)):
    """The whole application document (passwords stripped) plus the landing view."""
    return {
        "state": dump_state(store.state),
        "view": queries.landing_view(store.state),
        "canGenerate": store.can_generate,
    }


@router.put("/state/system")
async def select_system(body: SelectSystemBody, store: Store = Depends(get_store)):
    """Change the globally selected ruleset (GM only)."""
    require_gm(store)
    if get_system(body.system_id) is None:
        raise HTTPException(404, "Unknown system")
    state = store.dispatch(transitions.select_system, body.system_id)
    return {"currentSystemId": state.current_system_id}
