"""Session lifecycle, roster, log and dice endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from ordo_manager import dice, queries, transitions
from ordo_manager.models import AppState, Session
from ordo_manager.store import Store
from ordo_manager.systems import system_name

from .deps import get_store, raise_for, require_gm, require_user
from .models import AddToSessionBody, MessageBody, RollBody, StartSessionBody

router = APIRouter()


def _dump(state: AppState, session: Session) -> dict:
    data = session.model_dump(mode="json", by_alias=True)
    data["systemName"] = system_name(session.system_id)
    data["roster"] = [
        c.model_dump(mode="json", by_alias=True)
        for c in queries.session_roster(state, session)
    ]
    return data


def _active_or_404(store: Store) -> Session:
    session = queries.active_session(store.state)
    if session is None:
        raise HTTPException(404, "No active session")
    return session


@router.get("/sessions")
async def list_sessions(store: Store = Depends(get_store)):
    """All saved sessions."""
    require_gm(store)
    state = store.state
    return [_dump(state, s) for s in state.sessions]


@router.post("/sessions", status_code=201)
async def start_session(body: StartSessionBody, store: Store = Depends(get_store)):
    """Start a new session with the selected ruleset and make it active."""
    outcome = store.dispatch(transitions.start_session, body.name, store.state.current_user)
    raise_for(outcome)
    return _dump(outcome.state, queries.active_session(outcome.state))


@router.post("/sessions/pause")
async def pause_session(store: Store = Depends(get_store)):
    """Close the active session; it stays saved and can be resumed."""
    require_gm(store)
    store.dispatch(transitions.pause_session)
    return {"ok": True}


@router.get("/sessions/active")
async def get_active_session(store: Store = Depends(get_store)):
    require_user(store)
    return _dump(store.state, _active_or_404(store))


@router.post("/sessions/active/characters")
async def add_to_session(body: AddToSessionBody, store: Store = Depends(get_store)):
    """Bring a character into the active session (no-op if already there)."""
    user = require_user(store)
    session = _active_or_404(store)
    char = queries.find_character(store.state, body.character_id)
    if char is None:
        raise HTTPException(404, "Character not found")
    if char.id in session.active_character_ids:
        return _dump(store.state, session)
    if not queries.can_add_to_session(store.state, user, char):
        raise HTTPException(403, "Not your character")
    state = store.dispatch(transitions.add_character_to_session, char.id)
    return _dump(state, queries.active_session(state))


@router.post("/sessions/active/messages", status_code=201)
async def post_message(body: MessageBody, store: Store = Depends(get_store)):
    """Append a chat line from the current user to the active session log."""
    user = require_user(store)
    _active_or_404(store)
    if not body.text.strip():
        raise HTTPException(400, "Message is empty")
    state = store.dispatch(transitions.append_log, user.id, user.name, body.text)
    return queries.active_session(state).logs[0]


@router.post("/sessions/active/roll", status_code=201)
async def roll(body: RollBody, store: Store = Depends(get_store)):
    """Roll a die and log the result in the active session."""
    user = require_user(store)
    _active_or_404(store)
    try:
        result = dice.roll(body.sides)
    except ValueError as e:
        raise HTTPException(400, str(e))
    state = store.dispatch(transitions.record_roll, user, body.sides, result)
    return {"sides": body.sides, "result": result, "entry": queries.active_session(state).logs[0]}


@router.post("/sessions/{session_id}/resume")
async def resume_session(session_id: str, store: Store = Depends(get_store)):
    """Reopen a saved session; its ruleset becomes the selected one."""
    require_gm(store)
    outcome = store.dispatch(transitions.resume_session, session_id)
    raise_for(outcome)
    return _dump(outcome.state, queries.active_session(outcome.state))


@router.delete("/sessions/{session_id}")
async def delete_session(session_id: str, store: Store = Depends(get_store)):
    """Delete a session and its whole log."""
    require_gm(store)
    if queries.find_session(store.state, session_id) is None:
        raise HTTPException(404, "Session not found")
    store.dispatch(transitions.delete_session, session_id)
    return {"ok": True}
