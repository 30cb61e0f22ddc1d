"""Prompt catalog and compiled prompt models."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

PromptKind = Literal["chat", "text"]
MessageRole = Literal["user", "assistant"]


class PromptArgument(BaseModel):
    """A template variable a caller may fill in."""

    model_config = ConfigDict(strict=True, extra="ignore")

    name: str
    required: bool = False


class PromptSummary(BaseModel):
    """One catalog entry with its discovered arguments."""

    model_config = ConfigDict(extra="ignore")

    name: str
    arguments: list[PromptArgument] = Field(default_factory=list)

    @property
    def argument_names(self) -> list[str]:
        return [argument.name for argument in self.arguments]


class PromptPage(BaseModel):
    """A page of the catalog listing plus the cursor for the next page."""

    model_config = ConfigDict(extra="ignore")

    prompts: list[PromptSummary] = Field(default_factory=list)
    next_cursor: str | None = None


class CatalogEntry(BaseModel):
    """A prompt as it appears in the remote catalog listing."""

    model_config = ConfigDict(extra="ignore")

    name: str
    versions: list[int] = Field(default_factory=list)
    labels: list[str] = Field(default_factory=list)


class CatalogPage(BaseModel):
    """One page of the remote catalog."""

    model_config = ConfigDict(extra="ignore")

    entries: list[CatalogEntry] = Field(default_factory=list)
    page: int = 1
    total_pages: int = 0


class ChatMessageTemplate(BaseModel):
    """One uncompiled turn of a chat prompt, with the remote's own role name."""

    model_config = ConfigDict(extra="ignore")

    role: str
    content: str = ""


class PromptTemplate(BaseModel):
    """A prompt version fetched from the remote service, not yet compiled."""

    model_config = ConfigDict(extra="ignore")

    name: str
    kind: PromptKind
    template: str | list[ChatMessageTemplate]
    version: int | None = None


class ChatPrompt(BaseModel):
    kind: Literal["chat"] = "chat"
    messages: list[ChatMessageTemplate] = Field(default_factory=list)


class TextPrompt(BaseModel):
    kind: Literal["text"] = "text"
    text: str = ""


CompiledPrompt = Annotated[ChatPrompt | TextPrompt, Field(discriminator="kind")]


class PromptMessage(BaseModel):
    """A normalized, role-tagged message ready to hand to a caller."""

    model_config = ConfigDict(strict=True, extra="ignore")

    role: MessageRole
    text: str

    def to_protocol(self) -> dict[str, object]:
        return {"role": self.role, "content": {"type": "text", "text": self.text}}
