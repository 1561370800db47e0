"""Core domain models.

Every transition, query and storage call operates on these types. Models are
frozen: an update always produces a new object via ``model_copy(update=...)``
and never touches the one it was derived from.

Field names are snake_case in Python and camelCase on disk (``ownerId``,
``activeCharacterIds``, ...), so a stored document keeps the layout:

    {
      "currentUser": {...} | null,
      "users": [...],
      "characters": [...],
      "sessions": [...],
      "activeSessionId": "..." | null,
      "currentSystemId": "ordem-paranormal"
    }
"""

from __future__ import annotations

import time
import uuid
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

DEFAULT_SYSTEM_ID = "ordem-paranormal"


def new_id() -> str:
    return str(uuid.uuid4())


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


class UserRole(str, Enum):
    GM = "MESTRE"
    PLAYER = "JOGADOR"


class CharacterType(str, Enum):
    PC = "PERSONAGEM"
    NPC = "NPC"


class DocumentModel(BaseModel):
    """Base for everything stored in the application document."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class User(DocumentModel):
    """A profile. ``password`` is None for legacy accounts created before
    passwords existed; those are admitted without a check."""

    id: str
    name: str
    role: UserRole
    password: str | None = None
    avatar: str | None = None


class Attribute(DocumentModel):
    name: str
    value: int


class Stat(DocumentModel):
    """A current/max pool (hit points, sanity).

    ``current`` is clamped into ``[0, max]`` whenever a Stat is built,
    including when an older document is loaded.
    """

    current: int
    max: int = Field(ge=0)

    @model_validator(mode="before")
    @classmethod
    def _clamp_current(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        current, maximum = data.get("current"), data.get("max")
        if isinstance(current, int) and isinstance(maximum, int) and maximum >= 0:
            data = {**data, "current": min(max(current, 0), maximum)}
        return data

    @classmethod
    def full(cls, maximum: int) -> Stat:
        return cls(current=maximum, max=maximum)


class Character(DocumentModel):
    """A character sheet. ``owner_id`` may point at a user that no longer
    resolves; readers must treat that as an unknown owner."""

    id: str
    name: str
    type: CharacterType
    owner_id: str
    system_id: str
    description: str = ""
    attributes: list[Attribute] = Field(default_factory=list)
    hp: Stat
    san: Stat


class CharacterDraft(DocumentModel):
    """A generated character that has not been tagged with a ruleset yet."""

    id: str = Field(default_factory=new_id)
    name: str
    description: str = ""
    type: CharacterType = CharacterType.NPC
    owner_id: str
    attributes: list[Attribute] = Field(default_factory=list)
    hp: Stat
    san: Stat
    system_id: str | None = None


class ChatMessage(DocumentModel):
    """One immutable entry in a session log."""

    id: str = Field(default_factory=new_id)
    sender_id: str
    sender_name: str  # copied at send time, never re-resolved
    text: str
    timestamp: int = Field(default_factory=now_ms)
    is_system: bool = False


class Session(DocumentModel):
    id: str
    name: str
    gm_id: str
    system_id: str
    is_active: bool = True
    active_character_ids: list[str] = Field(default_factory=list)
    logs: list[ChatMessage] = Field(default_factory=list)  # newest first


class GameSystem(DocumentModel):
    id: str
    name: str
    description: str


class AppState(DocumentModel):
    """The whole application document, the single unit of persistence."""

    current_user: User | None = None
    users: list[User] = Field(default_factory=list)
    characters: list[Character] = Field(default_factory=list)
    sessions: list[Session] = Field(default_factory=list)
    active_session_id: str | None = None
    current_system_id: str = DEFAULT_SYSTEM_ID

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
