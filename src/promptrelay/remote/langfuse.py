"""Remote client backed by the Langfuse SDK."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from langfuse import Langfuse
from langfuse.model import ChatPromptClient

from ..config import RelayConfig
from ..exceptions import RemoteFetchFailure
from ..models import CatalogEntry, CatalogPage, ChatMessageTemplate, PromptKind, PromptTemplate

logger = logging.getLogger(__name__)


class LangfuseRemote:
    """Adapts the synchronous Langfuse SDK to the async ``RemoteClient`` protocol.

    Every SDK call runs in a worker thread so the event loop only suspends
    while a request is in flight.
    """

    def __init__(self, client: Langfuse) -> None:
        self.client = client

    @classmethod
    def from_config(cls, config: RelayConfig) -> LangfuseRemote:
        return cls(
            Langfuse(
                public_key=config.public_key,
                secret_key=config.secret_key,
                host=config.host,
            )
        )

    async def list_catalog(self, *, limit: int, page: int, label: str) -> CatalogPage:
        try:
            response = await asyncio.to_thread(
                self.client.api.prompts.list, limit=limit, page=page, label=label
            )
        except Exception as exc:
            raise RemoteFetchFailure(f"Failed to list prompts (page {page}): {exc}") from exc
        return CatalogPage(
            entries=[
                CatalogEntry(
                    name=meta.name,
                    versions=list(meta.versions or []),
                    labels=list(meta.labels or []),
                )
                for meta in response.data
            ],
            page=page,
            total_pages=response.meta.total_pages,
        )

    async def fetch_template(
        self,
        name: str,
        *,
        kind: PromptKind | None = None,
        version: int | None = None,
        cache_ttl_seconds: int | None = None,
    ) -> PromptTemplate:
        options: dict[str, Any] = {}
        if kind is not None:
            options["type"] = kind
        if cache_ttl_seconds is not None:
            options["cache_ttl_seconds"] = cache_ttl_seconds
        try:
            prompt = await asyncio.to_thread(self.client.get_prompt, name, version, **options)
        except Exception as exc:
            raise RemoteFetchFailure(f"Failed to fetch prompt '{name}': {exc}") from exc
        return _to_template(name, prompt)

    async def fetch_trace(self, trace_id: str) -> dict[str, Any]:
        try:
            trace = await asyncio.to_thread(self.client.api.trace.get, trace_id)
        except Exception as exc:
            raise RemoteFetchFailure(f"Failed to fetch trace {trace_id}: {exc}") from exc
        # The SDK model serializes with API field names (camelCase) and ISO dates.
        return json.loads(trace.json())


def _to_template(name: str, prompt: Any) -> PromptTemplate:
    version = getattr(prompt, "version", None)
    if isinstance(prompt, ChatPromptClient):
        messages = [
            ChatMessageTemplate(role=str(message["role"]), content=str(message.get("content", "")))
            for message in prompt.prompt
            if "role" in message
        ]
        return PromptTemplate(name=name, kind="chat", template=messages, version=version)
    return PromptTemplate(name=name, kind="text", template=str(prompt.prompt), version=version)
