"""Character endpoints: list, create, delete, ownership, type, NPC generation."""

from fastapi import APIRouter, Depends, HTTPException

from ordo_manager import queries, transitions
from ordo_manager.models import AppState, Character, UserRole
from ordo_manager.store import Store

from .deps import get_store, raise_for, require_gm, require_user
from .models import ChangeOwnerBody, CreateCharacter

router = APIRouter()


def _dump(state: AppState, char: Character) -> dict:
    data = char.model_dump(mode="json", by_alias=True)
    data["ownerName"] = queries.owner_name(state, char)
    return data


def _get_or_404(store: Store, char_id: str) -> Character:
    char = queries.find_character(store.state, char_id)
    if char is None:
        raise HTTPException(404, "Character not found")
    return char


@router.get("/characters")
async def list_characters(store: Store = Depends(get_store)):
    """Characters the current user can see: all of them for a GM, own ones for a player."""
    user = require_user(store)
    state = store.state
    return [_dump(state, c) for c in queries.visible_characters(state, user)]


@router.post("/characters", status_code=201)
async def create_character(body: CreateCharacter, store: Store = Depends(get_store)):
    """Create a character owned by the current user."""
    user = require_user(store)
    outcome = store.dispatch(transitions.create_character, body.name, user)
    raise_for(outcome)
    return _dump(outcome.state, outcome.state.characters[-1])


@router.post("/characters/generate", status_code=201)
async def generate_character(store: Store = Depends(get_store)):
    """Generate an NPC for the selected ruleset (GM only)."""
    require_gm(store)
    if store.generating:
        raise HTTPException(409, "Generation already in progress")
    char = await store.generate_npc()
    if char is None:
        raise HTTPException(503, "NPC generation unavailable")
    return _dump(store.state, char)


@router.delete("/characters/{char_id}")
async def delete_character(char_id: str, store: Store = Depends(get_store)):
    """Delete a character and remove it from every session roster."""
    user = require_user(store)
    char = _get_or_404(store, char_id)
    if not queries.can_manage_character(user, char):
        raise HTTPException(403, "Not your character")
    store.dispatch(transitions.delete_character, char_id)
    return {"ok": True}


@router.patch("/characters/{char_id}/owner")
async def change_owner(char_id: str, body: ChangeOwnerBody, store: Store = Depends(get_store)):
    """Reassign a character. A GM may give it to anyone; a player may only
    claim a GM-owned character for themselves."""
    user = require_user(store)
    char = _get_or_404(store, char_id)
    if user.role != UserRole.GM:
        if body.owner_id != user.id:
            raise HTTPException(403, "Players can only claim characters for themselves")
        owner = queries.find_user(store.state, char.owner_id)
        if char.owner_id != user.id and (owner is None or owner.role != UserRole.GM):
            raise HTTPException(403, "Only GM-owned characters can be claimed")
    state = store.dispatch(transitions.change_owner, char_id, body.owner_id)
    return _dump(state, queries.find_character(state, char_id))


@router.post("/characters/{char_id}/toggle-type")
async def toggle_type(char_id: str, store: Store = Depends(get_store)):
    """Flip a character between PC and NPC."""
    user = require_user(store)
    char = _get_or_404(store, char_id)
    if not queries.can_manage_character(user, char):
        raise HTTPException(403, "Not your character")
    state = store.dispatch(transitions.toggle_type, char_id)
    return _dump(state, queries.find_character(state, char_id))
