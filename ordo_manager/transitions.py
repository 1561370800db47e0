"""State transitions: pure functions from (document, intent) to document.

Nothing here mutates its input. Every function returns either the very same
``AppState`` object (the intent was a no-op) or a new one built with
``model_copy``. None of them raise.

Two return shapes:

  AppState  : unconditional intents (logout, delete, toggle, pause, ...).
              Missing targets simply leave the document unchanged.
  Outcome   : intents with user-facing validation (register, login,
              create_character, start_session, resume_session). On rejection
              ``outcome.state`` is the unchanged input and ``outcome.error``
              says why; ``outcome.kind`` classifies the rejection so the HTTP
              layer can pick a status code.

Text written into the document (system log entries, default descriptions,
attribute names) is Portuguese, matching the data the app has always stored.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Literal, NamedTuple

from ordo_manager.models import (
    AppState,
    Attribute,
    Character,
    CharacterDraft,
    CharacterType,
    ChatMessage,
    Session,
    Stat,
    User,
    UserRole,
    new_id,
    now_ms,
)
from ordo_manager.systems import get_system, system_name

logger = logging.getLogger(__name__)

RejectionKind = Literal["invalid", "unauthorized", "forbidden", "not_found", "conflict"]

STARTING_ATTRIBUTES = ("Força", "Agilidade", "Intelecto", "Presença", "Vigor")
STARTING_HP = 20
STARTING_SAN = 20
DEFAULT_DESCRIPTION = "Novo personagem"

SYSTEM_SENDER_ID = "system"
SYSTEM_SENDER_NAME = "Sistema"


class Outcome(NamedTuple):
    state: AppState
    error: str | None = None
    kind: RejectionKind | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _reject(state: AppState, kind: RejectionKind, error: str) -> Outcome:
    logger.debug("intent rejected kind=%s error=%s", kind, error)
    return Outcome(state, error, kind)


def _same_name(a: str, b: str) -> bool:
    return a.casefold() == b.casefold()


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------

def register(
    state: AppState,
    name: str,
    password: str,
    confirm_password: str,
    role: UserRole = UserRole.PLAYER,
) -> Outcome:
    """Create a user and log them in.

    Rejected when any field is empty, the passwords differ, or the name is
    taken (case-insensitive).
    """
    if not name.strip() or not password or not confirm_password:
        return _reject(state, "invalid", "Fill in all fields.")
    if password != confirm_password:
        return _reject(state, "invalid", "Passwords do not match.")
    if any(_same_name(u.name, name) for u in state.users):
        return _reject(state, "conflict", "User name already exists.")

    user = User(id=new_id(), name=name, role=role, password=password)
    logger.info("registered user id=%s role=%s", user.id, role.name)
    return Outcome(state.model_copy(update={
        "users": [*state.users, user],
        "current_user": user,
    }))


def login(state: AppState, name: str, password: str) -> Outcome:
    """Log in by case-insensitive name.

    A stored password must match exactly. A user whose password is None
    (legacy account) is admitted whatever was typed. An empty-string stored
    password is still a password and must be matched.
    """
    user = next((u for u in state.users if _same_name(u.name, name)), None)
    if user is None:
        return _reject(state, "not_found", "User not found.")
    if user.password is not None and user.password != password:
        return _reject(state, "unauthorized", "Wrong password.")
    return Outcome(state.model_copy(update={"current_user": user}))


def logout(state: AppState) -> AppState:
    """Clear the current user. The active session is left alone."""
    if state.current_user is None:
        return state
    return state.model_copy(update={"current_user": None})


# ---------------------------------------------------------------------------
# Characters
# ---------------------------------------------------------------------------

def create_character(state: AppState, name: str, acting_user: User | None) -> Outcome:
    """New sheet owned by ``acting_user``: an NPC for a GM, a PC for a player."""
    if acting_user is None:
        return _reject(state, "unauthorized", "Log in first.")
    if not name.strip():
        return _reject(state, "invalid", "Character name is required.")

    char = Character(
        id=new_id(),
        name=name.strip(),
        type=CharacterType.NPC if acting_user.role == UserRole.GM else CharacterType.PC,
        owner_id=acting_user.id,
        system_id=state.current_system_id,
        description=DEFAULT_DESCRIPTION,
        attributes=[Attribute(name=a, value=1) for a in STARTING_ATTRIBUTES],
        hp=Stat.full(STARTING_HP),
        san=Stat.full(STARTING_SAN),
    )
    return Outcome(state.model_copy(update={"characters": [*state.characters, char]}))


def delete_character(state: AppState, char_id: str) -> AppState:
    """Remove a character and drop its id from every session roster.

    Rosters are purged even when the character itself is already gone.
    """
    referenced = any(c.id == char_id for c in state.characters) or any(
        char_id in s.active_character_ids for s in state.sessions
    )
    if not referenced:
        return state
    sessions = [
        s.model_copy(update={
            "active_character_ids": [i for i in s.active_character_ids if i != char_id],
        }) if char_id in s.active_character_ids else s
        for s in state.sessions
    ]
    return state.model_copy(update={
        "characters": [c for c in state.characters if c.id != char_id],
        "sessions": sessions,
    })


def _update_character(state: AppState, char_id: str, **fields) -> AppState:
    if not any(c.id == char_id for c in state.characters):
        return state
    return state.model_copy(update={
        "characters": [
            c.model_copy(update=fields) if c.id == char_id else c
            for c in state.characters
        ],
    })


def change_owner(state: AppState, char_id: str, new_owner_id: str) -> AppState:
    """Reassign a character. ``new_owner_id`` is not checked against users."""
    return _update_character(state, char_id, owner_id=new_owner_id)


def toggle_type(state: AppState, char_id: str) -> AppState:
    char = next((c for c in state.characters if c.id == char_id), None)
    if char is None:
        return state
    flipped = CharacterType.NPC if char.type == CharacterType.PC else CharacterType.PC
    return _update_character(state, char_id, type=flipped)


def merge_generated_npc(
    state: AppState, draft: CharacterDraft, system_id: str | None = None,
) -> AppState:
    """Append a generated draft, tagged with ``system_id`` (default: the
    document's current ruleset). Whatever ruleset the draft carried is dropped."""
    char = Character(
        **draft.model_dump(exclude={"system_id"}),
        system_id=system_id or state.current_system_id,
    )
    return state.model_copy(update={"characters": [*state.characters, char]})


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------

def _with_active(sessions: list[Session], active_id: str | None) -> list[Session]:
    """Keep each session's ``is_active`` flag in line with the document pointer."""
    return [
        s if s.is_active == (s.id == active_id)
        else s.model_copy(update={"is_active": s.id == active_id})
        for s in sessions
    ]


def _active(state: AppState) -> Session | None:
    if state.active_session_id is None:
        return None
    return next((s for s in state.sessions if s.id == state.active_session_id), None)


def _replace_session(state: AppState, session: Session) -> AppState:
    return state.model_copy(update={
        "sessions": [session if s.id == session.id else s for s in state.sessions],
    })


def start_session(
    state: AppState, name: str, acting_user: User | None, now: int | None = None,
) -> Outcome:
    """Open a new session run by a GM and make it the active one."""
    if acting_user is None:
        return _reject(state, "unauthorized", "Log in first.")
    if acting_user.role != UserRole.GM:
        return _reject(state, "forbidden", "Only a GM can start a session.")
    if not name.strip():
        return _reject(state, "invalid", "Session name is required.")

    timestamp = now if now is not None else now_ms()
    started = datetime.fromtimestamp(timestamp / 1000).strftime("%H:%M:%S")
    opening = ChatMessage(
        sender_id=SYSTEM_SENDER_ID,
        sender_name=SYSTEM_SENDER_NAME,
        text=(
            f'Sessão "{name.strip()}" iniciada em {started} '
            f"usando sistema {system_name(state.current_system_id)}"
        ),
        timestamp=timestamp,
        is_system=True,
    )
    session = Session(
        id=new_id(),
        name=name.strip(),
        gm_id=acting_user.id,
        system_id=state.current_system_id,
        is_active=True,
        logs=[opening],
    )
    logger.info("session started id=%s gm=%s", session.id, acting_user.id)
    return Outcome(state.model_copy(update={
        "sessions": [*_with_active(state.sessions, session.id), session],
        "active_session_id": session.id,
    }))


def resume_session(state: AppState, session_id: str) -> Outcome:
    """Reopen a session. Its own ruleset replaces the globally selected one."""
    session = next((s for s in state.sessions if s.id == session_id), None)
    if session is None:
        return _reject(state, "not_found", "Session not found.")
    return Outcome(state.model_copy(update={
        "sessions": _with_active(state.sessions, session_id),
        "active_session_id": session_id,
        "current_system_id": session.system_id,
    }))


def pause_session(state: AppState) -> AppState:
    """Close the active session without touching its data."""
    if state.active_session_id is None:
        return state
    return state.model_copy(update={
        "sessions": _with_active(state.sessions, None),
        "active_session_id": None,
    })


def delete_session(state: AppState, session_id: str) -> AppState:
    if not any(s.id == session_id for s in state.sessions):
        return state
    active_id = None if state.active_session_id == session_id else state.active_session_id
    return state.model_copy(update={
        "sessions": [s for s in state.sessions if s.id != session_id],
        "active_session_id": active_id,
    })


def add_character_to_session(state: AppState, char_id: str) -> AppState:
    """Put a character on the active session's roster. Idempotent."""
    session = _active(state)
    if session is None or char_id in session.active_character_ids:
        return state
    if not any(c.id == char_id for c in state.characters):
        return state
    return _replace_session(state, session.model_copy(update={
        "active_character_ids": [*session.active_character_ids, char_id],
    }))


def append_log(
    state: AppState,
    sender_id: str,
    sender_name: str,
    text: str,
    is_system: bool = False,
    now: int | None = None,
) -> AppState:
    """Prepend an entry to the active session's log (newest first)."""
    session = _active(state)
    if session is None:
        return state
    entry = ChatMessage(
        sender_id=sender_id,
        sender_name=sender_name,
        text=text,
        timestamp=now if now is not None else now_ms(),
        is_system=is_system,
    )
    return _replace_session(state, session.model_copy(update={"logs": [entry, *session.logs]}))


def record_roll(
    state: AppState, user: User | None, sides: int, result: int, now: int | None = None,
) -> AppState:
    """Log a die roll made by ``user`` in the active session."""
    if user is None:
        return state
    return append_log(state, user.id, user.name, f"Rolou d{sides}: {result}", now=now)


def select_system(state: AppState, system_id: str) -> AppState:
    """Change the globally selected ruleset. Unknown ids are ignored."""
    if get_system(system_id) is None or state.current_system_id == system_id:
        return state
    return state.model_copy(update={"current_system_id": system_id})
