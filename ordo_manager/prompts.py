"""Handlebars prompt rendering for generation requests."""

from collections.abc import Callable
from typing import Any

import pybars


_compiler = pybars.Compiler()
_cache: dict[str, Callable] = {}


class PromptError(Exception):
    """Raised when a Handlebars template fails to compile or render."""


NPC_PROMPT = """\
Gere um personagem NPC para um RPG de mesa usando o sistema "{{{system}}}".
O NPC deve ser interessante, ter um nome, e uma breve descrição (máximo {{max_sentences}} frases) focada em {{themes}}.

Retorne APENAS um objeto JSON com o seguinte formato, sem markdown:
{
  "name": "Nome do NPC",
  "description": "Descrição curta e misteriosa.",
  "hpMax": 20,
  "sanMax": 10
}
"""


def render_prompt(template_str: str, context: dict[str, Any]) -> str:
    """Compile and render a Handlebars template with the given context.

    Templates are cached by source string to avoid recompilation.
    """
    try:
        compiled = _cache.get(template_str)
        if compiled is None:
            compiled = _compiler.compile(template_str)
            _cache[template_str] = compiled
        return str(compiled(context))
    except Exception as e:
        raise PromptError(f"Template error: {e}") from e


def npc_prompt(system_name: str) -> str:
    return render_prompt(NPC_PROMPT, {
        "system": system_name,
        "max_sentences": 2,
        "themes": "horror ou mistério",
    })
