import logging
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI

from backend.config import data_dir_from_env, llm_from_env
from backend.routes import router
from ordo_manager.llm import LLM
from ordo_manager.storage import Storage
from ordo_manager.store import Store

load_dotenv(Path(__file__).parent.parent / ".env")

logger = logging.getLogger(__name__)


def create_app(data_dir: Path | None = None, llm: LLM | None = None, use_env_llm: bool = True) -> FastAPI:
    """Build the API around a Store loaded from ``data_dir``.

    ``llm`` overrides the client configured from the environment; pass
    ``use_env_llm=False`` to run with generation disabled.
    """
    resolved = data_dir or data_dir_from_env()
    if llm is None and use_env_llm:
        llm = llm_from_env()
    if llm is None:
        logger.info("No LLM configured; NPC generation disabled")

    app = FastAPI(title="Ordo Manager")
    app.state.store = Store(Storage(resolved), llm=llm)
    app.include_router(router, prefix="/api")
    return app


# Default app instance for uvicorn (uses DATA_DIR env var or default)
app = create_app()
