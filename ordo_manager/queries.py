"""Read-side helpers: lookups and per-user views derived from the document.

References in the document are loose (a character's owner or a roster entry
may no longer resolve). Everything here resolves a missing reference to
``None``, a skip, or the ``UNKNOWN_OWNER`` label. Nothing raises.
"""

from __future__ import annotations

from typing import Literal

from ordo_manager.models import AppState, Character, Session, User, UserRole

UNKNOWN_OWNER = "Desconhecido"

View = Literal["profile", "characters", "session"]


def find_user(state: AppState, user_id: str) -> User | None:
    return next((u for u in state.users if u.id == user_id), None)


def find_character(state: AppState, char_id: str) -> Character | None:
    return next((c for c in state.characters if c.id == char_id), None)


def find_session(state: AppState, session_id: str) -> Session | None:
    return next((s for s in state.sessions if s.id == session_id), None)


def active_session(state: AppState) -> Session | None:
    if state.active_session_id is None:
        return None
    return find_session(state, state.active_session_id)


def owner_name(state: AppState, char: Character) -> str:
    owner = find_user(state, char.owner_id)
    return owner.name if owner else UNKNOWN_OWNER


def players(state: AppState) -> list[User]:
    """Users a GM can hand a character over to."""
    return [u for u in state.users if u.role == UserRole.PLAYER]


def visible_characters(state: AppState, user: User | None) -> list[Character]:
    """A GM sees every character; a player sees only their own."""
    if user is None:
        return []
    if user.role == UserRole.GM:
        return list(state.characters)
    return [c for c in state.characters if c.owner_id == user.id]


def session_roster(state: AppState, session: Session) -> list[Character]:
    """Characters on a session's roster, in roster order. Dangling ids are skipped."""
    by_id = {c.id: c for c in state.characters}
    return [by_id[i] for i in session.active_character_ids if i in by_id]


def can_manage_character(user: User | None, char: Character) -> bool:
    """Owners and GMs may delete a character or bring it into a session."""
    if user is None:
        return False
    return user.role == UserRole.GM or char.owner_id == user.id


def can_add_to_session(state: AppState, user: User | None, char: Character) -> bool:
    session = active_session(state)
    if session is None or char.id in session.active_character_ids:
        return False
    return can_manage_character(user, char)


def landing_view(state: AppState) -> View:
    """Where the app opens: the profile screen when logged out, otherwise the
    running session if there is one, else the character list."""
    if state.current_user is None:
        return "profile"
    if state.active_session_id is not None:
        return "session"
    return "characters"
