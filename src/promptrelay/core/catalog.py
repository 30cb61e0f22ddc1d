"""Catalog lister: one remote page into a uniform prompt listing."""

from __future__ import annotations

import logging

from ..exceptions import InvalidCursor, ListFailure
from ..models import PromptArgument, PromptPage, PromptSummary
from ..remote import RemoteClient
from .templates import template_variables

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100
DEFAULT_LABEL = "production"


def parse_cursor(cursor: str | None) -> int:
    """Turn a cursor into a 1-based page number. No cursor means page 1."""
    if cursor is None or cursor == "":
        return 1
    try:
        page = int(cursor.strip())
    except ValueError:
        raise InvalidCursor(f"Cursor must be a valid number, got {cursor!r}") from None
    if page < 1:
        raise InvalidCursor(f"Cursor must be a positive page number, got {cursor!r}")
    return page


class CatalogLister:
    """Lists prompts carrying a label, discovering each prompt's arguments.

    Each entry's template is fetched with the remote cache bypassed, so the
    argument list always reflects the currently labelled version. Nothing is
    cached locally.
    """

    def __init__(
        self,
        remote: RemoteClient,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        label: str = DEFAULT_LABEL,
    ) -> None:
        self.remote = remote
        self.page_size = page_size
        self.label = label

    async def list(self, cursor: str | None = None) -> PromptPage:
        page = parse_cursor(cursor)
        try:
            catalog = await self.remote.list_catalog(
                limit=self.page_size, page=page, label=self.label
            )
            prompts: list[PromptSummary] = []
            for entry in catalog.entries:
                template = await self.remote.fetch_template(entry.name, cache_ttl_seconds=0)
                prompts.append(
                    PromptSummary(
                        name=entry.name,
                        arguments=[
                            PromptArgument(name=variable, required=False)
                            for variable in template_variables(template)
                        ],
                    )
                )
        except Exception as exc:
            logger.error("Error fetching prompts (page %d): %s", page, exc)
            raise ListFailure("Failed to fetch prompts") from exc

        next_cursor = str(page + 1) if catalog.total_pages > page else None
        return PromptPage(prompts=prompts, next_cursor=next_cursor)
