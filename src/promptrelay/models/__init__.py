"""Data models for prompts, traces and responses."""

from .prompt import (
    CatalogEntry,
    CatalogPage,
    ChatMessageTemplate,
    ChatPrompt,
    CompiledPrompt,
    MessageRole,
    PromptArgument,
    PromptKind,
    PromptMessage,
    PromptPage,
    PromptSummary,
    PromptTemplate,
    TextPrompt,
)
from .result import ToolResult
from .trace import Observation, TraceRecord

__all__ = [
    "CatalogEntry",
    "CatalogPage",
    "ChatMessageTemplate",
    "ChatPrompt",
    "CompiledPrompt",
    "MessageRole",
    "Observation",
    "PromptArgument",
    "PromptKind",
    "PromptMessage",
    "PromptPage",
    "PromptSummary",
    "PromptTemplate",
    "TextPrompt",
    "ToolResult",
    "TraceRecord",
]
