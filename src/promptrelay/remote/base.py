"""Remote prompt-management client abstractions."""

from __future__ import annotations

from typing import Any, Protocol

from ..models import CatalogPage, PromptKind, PromptTemplate


class RemoteClient(Protocol):
    """Protocol for the remote catalog and trace API.

    Implementations raise ``RemoteFetchFailure`` (or any exception) when a
    request fails. Credentials and transport are the implementation's concern.
    """

    async def list_catalog(self, *, limit: int, page: int, label: str) -> CatalogPage: ...

    async def fetch_template(
        self,
        name: str,
        *,
        kind: PromptKind | None = None,
        version: int | None = None,
        cache_ttl_seconds: int | None = None,
    ) -> PromptTemplate: ...

    async def fetch_trace(self, trace_id: str) -> dict[str, Any]: ...
