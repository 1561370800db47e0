"""Environment configuration (read after .env is loaded).

  DATA_DIR              where the document is stored (default ./data)
  LLM_API_KEY           generation credential; API_KEY and GEMINI_API_KEY
                        are accepted as fallbacks. No key → generation off.
  LLM_PROVIDER_URL      backend base URL (default: public Gemini API)
  LLM_PROVIDER_FORMAT   "gemini" (default) or "openai"
  LLM_MODEL             model id (default gemini-2.5-flash)
"""

import os
from pathlib import Path

from ordo_manager.llm import DEFAULT_MODEL, GEMINI_URL, HttpLLM

DEFAULT_DATA_DIR = Path(__file__).parent.parent / "data"


def data_dir_from_env() -> Path:
    return Path(os.getenv("DATA_DIR", str(DEFAULT_DATA_DIR)))


def api_key_from_env() -> str:
    for name in ("LLM_API_KEY", "API_KEY", "GEMINI_API_KEY"):
        value = os.getenv(name, "")
        if value:
            return value
    return ""


def llm_from_env() -> HttpLLM | None:
    """Build the generation client, or None when no credential is configured."""
    api_key = api_key_from_env()
    if not api_key:
        return None
    provider_format = os.getenv("LLM_PROVIDER_FORMAT", "gemini")
    if provider_format not in ("gemini", "openai"):
        raise ValueError(f"Unknown LLM_PROVIDER_FORMAT: {provider_format}")
    return HttpLLM(
        provider_url=os.getenv("LLM_PROVIDER_URL", GEMINI_URL),
        api_key=api_key,
        provider_format=provider_format,
        model=os.getenv("LLM_MODEL", DEFAULT_MODEL),
    )
