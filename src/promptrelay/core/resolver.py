"""Prompt resolver: fetch a named prompt, compile it, normalize its messages."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from ..exceptions import PromptNotResolvable, RemoteFetchFailure
from ..models import (
    ChatPrompt,
    CompiledPrompt,
    MessageRole,
    PromptKind,
    PromptMessage,
    PromptTemplate,
)
from ..remote import RemoteClient
from .templates import compile_template

logger = logging.getLogger(__name__)

_ASSISTANT_ROLES = frozenset({"ai", "assistant"})


@dataclass(frozen=True)
class Resolved:
    template: PromptTemplate


@dataclass(frozen=True)
class Unresolved:
    cause: Exception


Attempt = Resolved | Unresolved


def normalize_role(role: str) -> MessageRole:
    return "assistant" if role in _ASSISTANT_ROLES else "user"


def to_messages(compiled: CompiledPrompt) -> list[PromptMessage]:
    if isinstance(compiled, ChatPrompt):
        return [
            PromptMessage(role=normalize_role(message.role), text=message.content)
            for message in compiled.messages
        ]
    return [PromptMessage(role="user", text=compiled.text)]


class PromptResolver:
    """Resolves a prompt as chat first, then as text.

    The text attempt only happens when the chat attempt is unresolved, either
    because the remote failed or because the prompt is not a chat prompt.
    """

    def __init__(self, remote: RemoteClient) -> None:
        self.remote = remote

    async def attempt(self, name: str, kind: PromptKind) -> Attempt:
        try:
            template = await self.remote.fetch_template(name, kind=kind)
        except Exception as exc:
            return Unresolved(exc)
        if kind == "chat" and template.kind != "chat":
            return Unresolved(RemoteFetchFailure(f"Prompt '{name}' is not a chat prompt"))
        return Resolved(template)

    async def resolve(
        self, name: str, arguments: Mapping[str, str] | None = None
    ) -> list[PromptMessage]:
        chat = await self.attempt(name, "chat")
        if isinstance(chat, Resolved):
            return to_messages(compile_template(chat.template, arguments))

        logger.info("Prompt '%s' unresolved as chat (%s), trying text", name, chat.cause)
        text = await self.attempt(name, "text")
        if isinstance(text, Resolved):
            return to_messages(compile_template(text.template, arguments))

        logger.error("Prompt '%s' could not be resolved: %s", name, text.cause)
        raise PromptNotResolvable(name, text.cause, chat_cause=chat.cause) from text.cause
