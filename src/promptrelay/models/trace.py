"""Trace record model. Only the fields the filters read are declared."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Observation(BaseModel):
    """One recorded step of a trace. Unknown fields are kept as-is."""

    model_config = ConfigDict(extra="allow")

    name: str | None = None
    input: Any = None
    output: Any = None

    def io_payload(self) -> dict[str, Any]:
        return {"input": self.input, "output": self.output}


class TraceRecord(BaseModel):
    """A full trace with its ordered observations."""

    model_config = ConfigDict(extra="allow")

    id: str = ""
    observations: list[Observation] = Field(default_factory=list)

    @property
    def observation_count(self) -> int:
        return len(self.observations)

    def structure_summary(self) -> list[dict[str, object]]:
        return [
            {"index": index, "name": observation.name}
            for index, observation in enumerate(self.observations)
        ]
