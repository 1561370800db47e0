"""Create demo data for development/testing."""

from ordo_manager import transitions
from ordo_manager.models import UserRole
from ordo_manager.storage import default_state
from ordo_manager.store import Store

DEMO_PASSWORD = "demo"

DEMO_USERS = [
    ("Mestre", UserRole.GM),
    ("Arthur", UserRole.PLAYER),
    ("Dante", UserRole.PLAYER),
]

DEMO_CHARACTERS = {
    "Arthur": ["Arthur Cervero"],
    "Dante": ["Dante Moreira"],
    "Mestre": ["Kian, o Ocultista"],
}


def create_demo_data(store: Store) -> None:
    """Wipe the document and create demo users, characters and one running session."""
    store.dispatch(lambda _state: default_state())

    for name, role in DEMO_USERS:
        store.dispatch(transitions.register, name, DEMO_PASSWORD, DEMO_PASSWORD, role)
        for char_name in DEMO_CHARACTERS.get(name, []):
            store.dispatch(transitions.create_character, char_name, store.state.current_user)

    gm = next(u for u in store.state.users if u.role == UserRole.GM)
    store.dispatch(transitions.login, gm.name, DEMO_PASSWORD)
    store.dispatch(transitions.start_session, "Segredo na Floresta", gm)
    for char in store.state.characters:
        if char.owner_id != gm.id:
            store.dispatch(transitions.add_character_to_session, char.id)
    store.dispatch(transitions.record_roll, gm, 20, 17)
    store.dispatch(transitions.logout)
