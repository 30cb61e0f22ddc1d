"""MCP request surface: prompts capability plus tool equivalents.

The handlers here only translate between protocol types and the pipelines in
``promptrelay.core``. All behaviour lives in those pipelines.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from .config import RelayConfig
from .core import CatalogLister, PromptResolver, TraceRetriever
from .exceptions import InvalidCursor, PromptNotResolvable
from .models import PromptMessage, PromptPage, ToolResult
from .remote import RemoteClient
from .storage import FileTraceCache, TraceCache

logger = logging.getLogger(__name__)

SERVER_NAME = "langfuse-prompts"
SERVER_VERSION = "1.0.0"

TOOLS = [
    types.Tool(
        name="get-prompts",
        description="Get prompts that are stored in Langfuse",
        inputSchema={
            "type": "object",
            "properties": {
                "cursor": {"type": "string", "description": "Cursor to paginate through prompts"},
            },
        },
    ),
    types.Tool(
        name="get-prompt",
        description="Get a prompt that is stored in Langfuse",
        inputSchema={
            "type": "object",
            "properties": {
                "name": {
                    "type": "string",
                    "description": (
                        "Name of the prompt to retrieve, use get-prompts to get a list of prompts"
                    ),
                },
                "arguments": {
                    "type": "object",
                    "additionalProperties": {"type": "string"},
                    "description": (
                        "Arguments with prompt variables to pass to the prompt template, "
                        'json object, e.g. {"<name>":"<value>"}'
                    ),
                },
            },
            "required": ["name"],
        },
    ),
    types.Tool(
        name="get_trace",
        description="Fetches trace data from Langfuse using the provided trace ID.",
        inputSchema={
            "type": "object",
            "properties": {
                "traceId": {"type": "string", "description": "The ID of the Langfuse trace to fetch."},
                "function_name": {
                    "type": "string",
                    "description": (
                        "Optional name of the function/observation to filter by within the trace"
                    ),
                },
                "index": {
                    "type": "integer",
                    "description": (
                        "Optional index (0-based) to select a specific function call "
                        "if multiple matches are found for function_name"
                    ),
                },
            },
            "required": ["traceId"],
        },
    ),
]


class PromptRelay:
    """Dispatches requests to the lister, resolver and retriever."""

    def __init__(
        self,
        lister: CatalogLister,
        resolver: PromptResolver,
        retriever: TraceRetriever,
    ) -> None:
        self.lister = lister
        self.resolver = resolver
        self.retriever = retriever

    @classmethod
    def from_config(
        cls,
        config: RelayConfig,
        remote: RemoteClient | None = None,
        cache: TraceCache | None = None,
    ) -> PromptRelay:
        if remote is None:
            from .remote.langfuse import LangfuseRemote

            remote = LangfuseRemote.from_config(config)
        return cls(
            lister=CatalogLister(remote, page_size=config.page_size, label=config.prompt_label),
            resolver=PromptResolver(remote),
            retriever=TraceRetriever(
                remote,
                cache if cache is not None else FileTraceCache(config.cache_dir),
                max_trace_bytes=config.max_trace_bytes,
            ),
        )

    async def list_prompts(self, cursor: str | None = None) -> PromptPage:
        return await self.lister.list(cursor)

    async def get_prompt(
        self, name: str, arguments: Mapping[str, str] | None = None
    ) -> list[PromptMessage]:
        return await self.resolver.resolve(name, arguments)

    async def call_tool(self, name: str, arguments: Mapping[str, Any] | None) -> ToolResult:
        args = dict(arguments or {})
        if name == "get_trace":
            trace_id = args.get("traceId")
            if not isinstance(trace_id, str) or not trace_id:
                return ToolResult.error("Error: traceId must be a non-empty string")
            index = args.get("index")
            if index is not None and (not isinstance(index, int) or isinstance(index, bool)):
                return ToolResult.error("Error: index must be an integer")
            return await self.retriever.get_trace(
                trace_id, function_name=args.get("function_name"), index=index
            )

        try:
            if name == "get-prompts":
                page = await self.list_prompts(args.get("cursor"))
                return ToolResult.from_blocks(
                    [
                        json.dumps(summary.model_dump(), ensure_ascii=False)
                        for summary in page.prompts
                    ]
                )
            if name == "get-prompt":
                prompt_name = args.get("name")
                if not isinstance(prompt_name, str) or not prompt_name:
                    return ToolResult.error("Error: name must be a non-empty string")
                messages = await self.get_prompt(prompt_name, args.get("arguments"))
                return ToolResult(
                    text=json.dumps(
                        {"messages": [message.to_protocol() for message in messages]},
                        ensure_ascii=False,
                    )
                )
        except Exception as exc:
            logger.error("Tool %s failed: %s", name, exc)
            return ToolResult.error(f"Error: {exc}")
        return ToolResult.error(f"Error: Unknown tool: {name}")


def tool_result_to_protocol(result: ToolResult) -> types.CallToolResult:
    """Convert a ``ToolResult`` into protocol content blocks, one per entry of ``texts``."""
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text) for text in result.texts],
        isError=result.is_error,
    )


def page_to_protocol(page: PromptPage) -> types.ListPromptsResult:
    return types.ListPromptsResult(
        prompts=[
            types.Prompt(
                name=summary.name,
                arguments=[
                    types.PromptArgument(name=argument.name, required=argument.required)
                    for argument in summary.arguments
                ],
            )
            for summary in page.prompts
        ],
        nextCursor=page.next_cursor,
    )


def messages_to_protocol(messages: list[PromptMessage]) -> types.GetPromptResult:
    return types.GetPromptResult(
        messages=[
            types.PromptMessage(
                role=message.role,
                content=types.TextContent(type="text", text=message.text),
            )
            for message in messages
        ]
    )


def build_server(relay: PromptRelay) -> Server:
    server: Server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_prompts()
    async def handle_list_prompts(request: types.ListPromptsRequest) -> types.ListPromptsResult:
        cursor = request.params.cursor if request.params else None
        try:
            page = await relay.list_prompts(cursor)
        except InvalidCursor as exc:
            raise McpError(types.ErrorData(code=types.INVALID_PARAMS, message=str(exc))) from exc
        except Exception as exc:
            raise McpError(types.ErrorData(code=types.INTERNAL_ERROR, message=str(exc))) from exc
        return page_to_protocol(page)

    @server.get_prompt()
    async def handle_get_prompt(
        name: str, arguments: dict[str, str] | None
    ) -> types.GetPromptResult:
        try:
            messages = await relay.get_prompt(name, arguments)
        except PromptNotResolvable as exc:
            raise McpError(types.ErrorData(code=types.INVALID_PARAMS, message=str(exc))) from exc
        return messages_to_protocol(messages)

    @server.list_tools()
    async def handle_list_tools() -> list[types.Tool]:
        return TOOLS

    @server.call_tool()
    async def handle_call_tool(name: str, arguments: dict[str, Any]) -> types.CallToolResult:
        result = await relay.call_tool(name, arguments)
        return tool_result_to_protocol(result)

    return server


async def serve_stdio(relay: PromptRelay) -> None:
    server = build_server(relay)
    async with stdio_server() as (read_stream, write_stream):
        logger.info("Langfuse Prompts MCP Server running on stdio")
        await server.run(read_stream, write_stream, server.create_initialization_options())
