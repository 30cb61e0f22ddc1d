"""JSON serialization helpers for trace documents."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ..exceptions import TraceCacheLoadError


def to_compact_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def to_pretty_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, indent=2)


def trace_to_json(document: Mapping[str, Any], *, indent: int | None = 2) -> str:
    return json.dumps(document, ensure_ascii=False, indent=indent)


def trace_from_json(payload: str) -> dict[str, Any]:
    """Parse a JSON string into a trace document.

    Raises ``TraceCacheLoadError`` on invalid input or when the payload is not
    a JSON object.
    """
    try:
        document = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise TraceCacheLoadError(f"Failed to parse trace JSON: {exc}") from exc
    if not isinstance(document, dict):
        raise TraceCacheLoadError(
            f"Failed to parse trace JSON: expected an object, got {type(document).__name__}"
        )
    return document


def save_trace_json(
    document: Mapping[str, Any], path: str | Path, *, indent: int | None = 2
) -> Path:
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(trace_to_json(document, indent=indent), encoding="utf-8")
    return output_path


def load_trace_json(path: str | Path) -> dict[str, Any]:
    """Load a trace document from a JSON file.

    Raises ``TraceCacheLoadError`` on invalid content,
    or ``FileNotFoundError`` / ``OSError`` if the file is inaccessible.
    """
    payload = Path(path).read_text(encoding="utf-8")
    return trace_from_json(payload)
