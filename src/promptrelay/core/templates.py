"""Placeholder scanning and substitution for ``{{ variable }}`` templates.

This is a token scan, not a template-language parser: anything that looks
like ``{{ name }}`` counts, wherever it appears.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from typing import Any

from ..models import ChatMessageTemplate, ChatPrompt, CompiledPrompt, PromptTemplate, TextPrompt

_PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")


def extract_variables(serialized: str) -> list[str]:
    """Return placeholder names in order of first appearance."""
    return list(dict.fromkeys(match.group(1) for match in _PLACEHOLDER.finditer(serialized)))


def template_variables(template: PromptTemplate) -> list[str]:
    return extract_variables(_serialize(template.template))


def compile_text(text: str, arguments: Mapping[str, str]) -> str:
    """Substitute known arguments. Unknown placeholders are left untouched.

    Compilation happens here rather than in the remote SDK so every
    ``RemoteClient``, test doubles included, compiles the same way.
    """

    def replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in arguments:
            return str(arguments[name])
        return match.group(0)

    return _PLACEHOLDER.sub(replace, text)


def compile_template(
    template: PromptTemplate, arguments: Mapping[str, str] | None = None
) -> CompiledPrompt:
    values = arguments or {}
    if isinstance(template.template, str):
        return TextPrompt(text=compile_text(template.template, values))
    return ChatPrompt(
        messages=[
            ChatMessageTemplate(role=message.role, content=compile_text(message.content, values))
            for message in template.template
        ]
    )


def _serialize(value: str | list[ChatMessageTemplate]) -> str:
    payload: Any = value
    if isinstance(value, list):
        payload = [message.model_dump() for message in value]
    return json.dumps(payload, ensure_ascii=False)
