"""NPC generation through an LLM.

generate_npc() never raises. No configured LLM, a backend failure, a template
failure, or a reply that is not the expected JSON object all come back as
None, which callers treat as "generation unavailable".
"""

from __future__ import annotations

import json
import logging

from pydantic import BaseModel, Field, ValidationError

from ordo_manager.llm import LLM, LLMError
from ordo_manager.models import Attribute, CharacterDraft, CharacterType, Stat
from ordo_manager.prompts import PromptError, npc_prompt

logger = logging.getLogger(__name__)

NPC_ATTRIBUTES = (
    ("Força", 1),
    ("Agilidade", 2),
    ("Intelecto", 3),
    ("Presença", 2),
    ("Vigor", 1),
)


class GeneratedNPC(BaseModel):
    """The JSON object the model is asked to reply with."""

    name: str = Field(min_length=1)
    description: str = ""
    hp_max: int = Field(alias="hpMax", ge=0)
    san_max: int = Field(alias="sanMax", ge=0)


def _parse_json_output(text: str) -> dict | None:
    """Parse JSON from LLM output, stripping markdown fences."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        lines = [l for l in lines[1:] if not l.strip().startswith("```")]
        cleaned = "\n".join(lines)
    try:
        data = json.loads(cleaned)
        return data if isinstance(data, dict) else None
    except json.JSONDecodeError as e:
        logger.warning("NPC generator output is not valid JSON: %s", e)
        return None


def build_draft(generated: GeneratedNPC, owner_id: str) -> CharacterDraft:
    return CharacterDraft(
        name=generated.name,
        description=generated.description,
        type=CharacterType.NPC,
        owner_id=owner_id,
        attributes=[Attribute(name=n, value=v) for n, v in NPC_ATTRIBUTES],
        hp=Stat.full(generated.hp_max),
        san=Stat.full(generated.san_max),
    )


async def generate_npc(llm: LLM | None, system_name: str, owner_id: str) -> CharacterDraft | None:
    """Ask the LLM for an NPC for ``system_name``, owned by ``owner_id``.

    One attempt, no retry.
    """
    if llm is None:
        logger.warning("No LLM API key configured. NPC generation disabled.")
        return None

    try:
        text = await llm("npc_generator", npc_prompt(system_name))
    except (LLMError, PromptError) as e:
        logger.warning("NPC generation failed: %s", e)
        return None

    data = _parse_json_output(text)
    if data is None:
        return None
    try:
        generated = GeneratedNPC.model_validate(data)
    except ValidationError as e:
        logger.warning("NPC generator returned an unexpected object: %s", e)
        return None

    logger.info("generated NPC name=%s system=%s", generated.name, system_name)
    return build_draft(generated, owner_id)
