"""FastAPI API endpoints under /api.

Endpoint groups: settings (health, rulesets, whole document), auth (register,
login, logout, users), characters, sessions (lifecycle, roster, log, dice).
Every endpoint reads the Store from ``app.state.store``; mutations go through
``Store.dispatch`` so each change is saved as it happens.
"""

from fastapi import APIRouter

from .auth import router as auth_router
from .characters import router as characters_router
from .sessions import router as sessions_router
from .settings import router as settings_router

router = APIRouter()
router.include_router(settings_router)
router.include_router(auth_router)
router.include_router(characters_router)
router.include_router(sessions_router)
