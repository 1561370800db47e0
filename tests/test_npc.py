"""Tests for NPC generation. Every failure collapses to None."""

import json
from unittest.mock import AsyncMock, patch

import httpx

from ordo_manager.llm import HttpLLM, LLMError
from ordo_manager.models import CharacterType, Stat
from ordo_manager.npc import NPC_ATTRIBUTES, generate_npc
from ordo_manager.prompts import PromptError

REPLY = {"name": "Kian", "description": "Ocultista recluso.", "hpMax": 15, "sanMax": 9}


async def test_builds_draft_from_reply():
    llm = AsyncMock(return_value=json.dumps(REPLY))
    draft = await generate_npc(llm, "Ordem Paranormal", "gm-1")
    assert draft is not None
    assert draft.name == "Kian"
    assert draft.description == "Ocultista recluso."
    assert draft.type == CharacterType.NPC
    assert draft.owner_id == "gm-1"
    assert draft.hp == Stat(current=15, max=15)
    assert draft.san == Stat(current=9, max=9)
    assert [(a.name, a.value) for a in draft.attributes] == list(NPC_ATTRIBUTES)
    assert draft.system_id is None


async def test_prompt_names_system():
    llm = AsyncMock(return_value=json.dumps(REPLY))
    await generate_npc(llm, "D&D 5e", "gm-1")
    stage, prompt = llm.call_args[0]
    assert stage == "npc_generator"
    assert '"D&D 5e"' in prompt


async def test_markdown_fenced_reply_accepted():
    llm = AsyncMock(return_value="```json\n" + json.dumps(REPLY) + "\n```")
    draft = await generate_npc(llm, "Ordem Paranormal", "gm-1")
    assert draft is not None
    assert draft.name == "Kian"


async def test_each_draft_gets_a_fresh_id():
    llm = AsyncMock(return_value=json.dumps(REPLY))
    a = await generate_npc(llm, "x", "gm-1")
    b = await generate_npc(llm, "x", "gm-1")
    assert a.id != b.id


async def test_no_llm_returns_none():
    assert await generate_npc(None, "Ordem Paranormal", "gm-1") is None


async def test_llm_error_returns_none():
    llm = AsyncMock(side_effect=LLMError("down"))
    assert await generate_npc(llm, "Ordem Paranormal", "gm-1") is None


async def test_transport_error_from_http_client_returns_none():
    llm = HttpLLM(api_key="k")
    with patch("httpx.AsyncClient.post", AsyncMock(side_effect=httpx.ReadError("connection reset"))):
        assert await generate_npc(llm, "Ordem Paranormal", "gm-1") is None


async def test_prompt_error_returns_none():
    llm = AsyncMock(return_value=json.dumps(REPLY))
    with patch("ordo_manager.npc.npc_prompt", side_effect=PromptError("bad")):
        assert await generate_npc(llm, "x", "gm-1") is None
    llm.assert_not_called()


async def test_invalid_json_returns_none():
    llm = AsyncMock(return_value="O NPC se chama Kian.")
    assert await generate_npc(llm, "x", "gm-1") is None


async def test_json_array_returns_none():
    llm = AsyncMock(return_value="[1, 2]")
    assert await generate_npc(llm, "x", "gm-1") is None


async def test_missing_fields_returns_none():
    llm = AsyncMock(return_value=json.dumps({"name": "Kian"}))
    assert await generate_npc(llm, "x", "gm-1") is None


async def test_negative_pool_returns_none():
    llm = AsyncMock(return_value=json.dumps({**REPLY, "hpMax": -3}))
    assert await generate_npc(llm, "x", "gm-1") is None
