"""Store: owns the live application document.

All mutation goes through ``Store.dispatch(transition, *args)``: the
transition computes the next document from the current one and, when the
result differs, the store swaps it in and saves it. Saving happens after
every change, synchronously, and is best-effort (see Storage.save).

    store = Store(Storage(Path("data")), llm=None)
    outcome = store.dispatch(transitions.register, "Alice", "pw", "pw", UserRole.PLAYER)
    if not outcome.ok:
        print(outcome.error)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ordo_manager.llm import LLM
from ordo_manager.models import AppState, Character
from ordo_manager.npc import generate_npc
from ordo_manager.queries import find_character
from ordo_manager.storage import Storage
from ordo_manager.systems import system_name
from ordo_manager.transitions import Outcome, merge_generated_npc

logger = logging.getLogger(__name__)


class Store:
    def __init__(self, storage: Storage, llm: LLM | None = None) -> None:
        self._storage = storage
        self._llm = llm
        self._state = storage.load()
        self._generating = False

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def generating(self) -> bool:
        """True while an NPC generation request is in flight."""
        return self._generating

    @property
    def can_generate(self) -> bool:
        return self._llm is not None

    def dispatch(self, transition: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Apply ``transition`` to the current document and persist the result.

        Returns whatever the transition returned (an AppState or an Outcome).
        """
        result = transition(self._state, *args, **kwargs)
        self._commit(result.state if isinstance(result, Outcome) else result)
        return result

    def _commit(self, state: AppState) -> None:
        if state is self._state:
            return
        self._state = state
        self._storage.save(state)

    async def generate_npc(self) -> Character | None:
        """Generate an NPC for the current user and merge it into the document.

        The ruleset is captured when the request starts; the result is merged
        into whatever document is current when it completes. Returns None when
        nobody is logged in, a request is already pending, or generation failed.
        """
        user = self._state.current_user
        if user is None or self._generating:
            return None
        system_id = self._state.current_system_id

        self._generating = True
        try:
            draft = await generate_npc(self._llm, system_name(system_id), user.id)
        finally:
            self._generating = False

        if draft is None:
            return None
        self.dispatch(merge_generated_npc, draft, system_id)
        logger.info("merged generated NPC id=%s owner=%s", draft.id, user.id)
        return find_character(self._state, draft.id)
