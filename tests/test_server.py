from __future__ import annotations

import json
from pathlib import Path

import pytest
from conftest import FakeRemote, chat_template, make_trace, text_template
from mcp import types
from mcp.shared.exceptions import McpError

from promptrelay.config import RelayConfig
from promptrelay.models import PromptArgument, PromptMessage, PromptPage, PromptSummary, ToolResult
from promptrelay.server import (
    SERVER_NAME,
    TOOLS,
    PromptRelay,
    build_server,
    messages_to_protocol,
    page_to_protocol,
    tool_result_to_protocol,
)
from promptrelay.storage import FileTraceCache, MemoryTraceCache


def _config(tmp_path: Path) -> RelayConfig:
    return RelayConfig(
        public_key="pk",
        secret_key="sk",
        host="http://localhost:3000",
        cache_dir=tmp_path / "cache",
    )


@pytest.fixture
def relay(remote: FakeRemote, tmp_path: Path) -> PromptRelay:
    remote.pages = {1: ["greet", "support"]}
    remote.templates = {
        "greet": text_template("greet", "Hello {{name}}"),
        "support": chat_template("support", ("system", "Help with {{topic}}"), ("ai", "Sure.")),
    }
    remote.traces["t1"] = make_trace("t1", ["plan", "answer"])
    return PromptRelay.from_config(_config(tmp_path), remote=remote, cache=MemoryTraceCache())


def test_from_config_defaults_to_file_cache(remote: FakeRemote, tmp_path: Path) -> None:
    relay = PromptRelay.from_config(_config(tmp_path), remote=remote)

    assert isinstance(relay.retriever.cache, FileTraceCache)
    assert relay.retriever.cache.directory == tmp_path / "cache"
    assert relay.lister.page_size == 100
    assert relay.lister.label == "production"


@pytest.mark.asyncio
async def test_get_prompts_tool_emits_one_block_per_prompt(relay: PromptRelay) -> None:
    result = await relay.call_tool("get-prompts", {})
    protocol = tool_result_to_protocol(result)

    assert not protocol.isError
    payloads = [json.loads(block.text) for block in protocol.content]
    assert payloads == [
        {"name": "greet", "arguments": [{"name": "name", "required": False}]},
        {"name": "support", "arguments": [{"name": "topic", "required": False}]},
    ]


@pytest.mark.asyncio
async def test_get_prompts_tool_reports_invalid_cursor(relay: PromptRelay) -> None:
    result = await relay.call_tool("get-prompts", {"cursor": "abc"})

    assert result.is_error
    assert result.text.startswith("Error: Cursor must be a valid number")


@pytest.mark.asyncio
async def test_get_prompt_tool_returns_messages_json(relay: PromptRelay) -> None:
    result = await relay.call_tool("get-prompt", {"name": "support", "arguments": {"topic": "tax"}})

    assert not result.is_error
    assert json.loads(result.text) == {
        "messages": [
            {"role": "user", "content": {"type": "text", "text": "Help with tax"}},
            {"role": "assistant", "content": {"type": "text", "text": "Sure."}},
        ]
    }


@pytest.mark.asyncio
async def test_get_prompt_tool_reports_unresolvable_prompt(
    relay: PromptRelay, remote: FakeRemote
) -> None:
    remote.fail_kinds = {"chat", "text"}
    result = await relay.call_tool("get-prompt", {"name": "greet"})

    assert result.is_error
    assert result.text.startswith("Error: Failed to get prompt for 'greet'")


@pytest.mark.asyncio
async def test_get_trace_tool_passes_filters(relay: PromptRelay) -> None:
    result = await relay.call_tool("get_trace", {"traceId": "t1", "function_name": "answer"})
    assert json.loads(result.text) == {"input": {"step": 1}, "output": {"result": "answer-1"}}

    by_index = await relay.call_tool("get_trace", {"traceId": "t1", "index": 0})
    assert json.loads(by_index.text)["output"] == {"result": "plan-0"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("name", "arguments", "message"),
    [
        ("get_trace", {}, "traceId must be a non-empty string"),
        ("get_trace", {"traceId": "t1", "index": "2"}, "index must be an integer"),
        ("get-prompt", {}, "name must be a non-empty string"),
        ("delete_everything", {}, "Unknown tool: delete_everything"),
    ],
)
async def test_call_tool_rejects_bad_requests(
    relay: PromptRelay, name: str, arguments: dict[str, object], message: str
) -> None:
    result = await relay.call_tool(name, arguments)

    assert result.is_error
    assert message in result.text


def test_error_result_is_single_flagged_block() -> None:
    protocol = tool_result_to_protocol(ToolResult.error("Error: boom"))

    assert protocol.isError
    assert [block.text for block in protocol.content] == ["Error: boom"]


def test_page_and_messages_protocol_conversion() -> None:
    page = PromptPage(
        prompts=[PromptSummary(name="greet", arguments=[PromptArgument(name="name")])],
        next_cursor="2",
    )
    listing = page_to_protocol(page)
    assert listing.nextCursor == "2"
    assert listing.prompts[0].name == "greet"
    assert listing.prompts[0].arguments is not None
    assert listing.prompts[0].arguments[0].required is False

    result = messages_to_protocol([PromptMessage(role="assistant", text="hi")])
    assert result.messages[0].role == "assistant"
    assert result.messages[0].content.text == "hi"


def test_build_server_registers_tools(relay: PromptRelay) -> None:
    server = build_server(relay)

    assert server.name == SERVER_NAME
    assert [tool.name for tool in TOOLS] == ["get-prompts", "get-prompt", "get_trace"]


@pytest.mark.asyncio
async def test_get_prompts_blocks_survive_line_separator_characters(
    relay: PromptRelay, remote: FakeRemote
) -> None:
    remote.pages = {1: ["a\u2028b", "c\u0085d"]}
    remote.templates["a\u2028b"] = text_template("a\u2028b", "Hi {{y}}")
    remote.templates["c\u0085d"] = text_template("c\u0085d", "plain")

    protocol = tool_result_to_protocol(await relay.call_tool("get-prompts", {}))

    payloads = [json.loads(block.text) for block in protocol.content]
    assert [payload["name"] for payload in payloads] == ["a\u2028b", "c\u0085d"]
    assert payloads[0]["arguments"] == [{"name": "y", "required": False}]


@pytest.mark.asyncio
async def test_get_prompts_empty_page_has_no_blocks(relay: PromptRelay, remote: FakeRemote) -> None:
    remote.pages = {1: []}
    protocol = tool_result_to_protocol(await relay.call_tool("get-prompts", {}))

    assert not protocol.isError
    assert protocol.content == []


def _list_request(cursor: str | None) -> types.ListPromptsRequest:
    params = {"cursor": cursor} if cursor is not None else {}
    return types.ListPromptsRequest.model_validate({"method": "prompts/list", "params": params})


def _get_request(name: str, arguments: dict[str, str] | None = None) -> types.GetPromptRequest:
    params: dict[str, object] = {"name": name}
    if arguments is not None:
        params["arguments"] = arguments
    return types.GetPromptRequest.model_validate({"method": "prompts/get", "params": params})


@pytest.mark.asyncio
async def test_list_prompts_handler_forwards_cursor(relay: PromptRelay, remote: FakeRemote) -> None:
    remote.pages[2] = ["greet"]
    handler = build_server(relay).request_handlers[types.ListPromptsRequest]

    result = (await handler(_list_request("2"))).root

    assert isinstance(result, types.ListPromptsResult)
    assert [prompt.name for prompt in result.prompts] == ["greet"]
    assert result.nextCursor is None
    assert ("list_catalog", 100, 2, "production") in remote.calls

    first = (await handler(_list_request(None))).root
    assert first.nextCursor == "2"


@pytest.mark.asyncio
async def test_list_prompts_handler_maps_invalid_cursor_to_invalid_params(
    relay: PromptRelay,
) -> None:
    handler = build_server(relay).request_handlers[types.ListPromptsRequest]

    with pytest.raises(McpError) as exc_info:
        await handler(_list_request("not-a-number"))
    assert exc_info.value.error.code == types.INVALID_PARAMS


@pytest.mark.asyncio
async def test_list_prompts_handler_maps_remote_failure_to_internal_error(
    relay: PromptRelay, remote: FakeRemote
) -> None:
    remote.fail_catalog = True
    handler = build_server(relay).request_handlers[types.ListPromptsRequest]

    with pytest.raises(McpError) as exc_info:
        await handler(_list_request(None))
    assert exc_info.value.error.code == types.INTERNAL_ERROR
    assert "Failed to fetch prompts" in exc_info.value.error.message


@pytest.mark.asyncio
async def test_get_prompt_handler_returns_messages(relay: PromptRelay) -> None:
    handler = build_server(relay).request_handlers[types.GetPromptRequest]

    result = (await handler(_get_request("support", {"topic": "tax"}))).root

    assert isinstance(result, types.GetPromptResult)
    assert [(message.role, message.content.text) for message in result.messages] == [
        ("user", "Help with tax"),
        ("assistant", "Sure."),
    ]


@pytest.mark.asyncio
async def test_get_prompt_handler_raises_mcp_error_when_unresolvable(
    relay: PromptRelay, remote: FakeRemote
) -> None:
    remote.fail_kinds = {"chat", "text"}
    handler = build_server(relay).request_handlers[types.GetPromptRequest]

    with pytest.raises(McpError) as exc_info:
        await handler(_get_request("greet"))
    assert exc_info.value.error.code == types.INVALID_PARAMS
    assert "Failed to get prompt for 'greet'" in exc_info.value.error.message
