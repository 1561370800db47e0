"""Built-in ruleset registry.

Characters, sessions and the document's ``current_system_id`` refer to these
by id. The list is fixed; users cannot add rulesets.
"""

from ordo_manager.models import DEFAULT_SYSTEM_ID, GameSystem

DEFAULT_SYSTEMS: list[GameSystem] = [
    GameSystem(
        id=DEFAULT_SYSTEM_ID,
        name="Ordem Paranormal",
        description="Investigação e horror paranormal.",
    ),
    GameSystem(
        id="dnd-5e",
        name="D&D 5e",
        description="Fantasia medieval heroica.",
    ),
]

GENERIC_SYSTEM_NAME = "RPG Genérico"


def get_system(system_id: str) -> GameSystem | None:
    for system in DEFAULT_SYSTEMS:
        if system.id == system_id:
            return system
    return None


def system_name(system_id: str) -> str:
    """Display name for a ruleset id, or a generic label if it is unknown."""
    system = get_system(system_id)
    return system.name if system else GENERIC_SYSTEM_NAME
