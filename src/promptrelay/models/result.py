"""Response payload returned by tool-style operations."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ToolResult(BaseModel):
    """A text payload flagged as success or error.

    ``blocks`` holds separate content blocks when a response carries more
    than one; ``text`` is then their newline-joined form for display only.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    text: str
    is_error: bool = False
    blocks: list[str] | None = None

    @classmethod
    def error(cls, message: str) -> ToolResult:
        return cls(text=message, is_error=True)

    @classmethod
    def from_blocks(cls, blocks: list[str]) -> ToolResult:
        return cls(text="\n".join(blocks), blocks=list(blocks))

    @property
    def texts(self) -> list[str]:
        return list(self.blocks) if self.blocks is not None else [self.text]
