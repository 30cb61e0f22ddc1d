"""Rich-based rendering of a cached trace's observation tree."""

from __future__ import annotations

import json
from collections import defaultdict
from datetime import datetime
from io import StringIO
from typing import Any, Literal

from rich.console import Console
from rich.tree import Tree

from ..models import Observation, TraceRecord

Verbosity = Literal["minimal", "standard", "full"]
_MAX_VALUE_LEN = 200


def render_trace(record: TraceRecord, *, verbosity: Verbosity = "standard") -> str:
    tree = Tree(_trace_label(record))
    known_ids = {_extra(observation, "id") for observation in record.observations} - {None}
    children_by_parent: dict[str | None, list[tuple[int, Observation]]] = defaultdict(list)
    for position, observation in enumerate(record.observations):
        parent_id = _extra(observation, "parentObservationId")
        if parent_id not in known_ids:
            parent_id = None
        children_by_parent[parent_id].append((position, observation))

    for siblings in children_by_parent.values():
        siblings.sort(key=lambda item: (_extra(item[1], "startTime") or "", item[0]))

    for position, root in children_by_parent[None]:
        _add_branch(tree, position, root, children_by_parent, verbosity)

    console = Console(record=True, width=120, markup=False, file=StringIO())
    console.print(tree)
    return console.export_text()


def _trace_label(record: TraceRecord) -> str:
    name = _extra(record, "name") or record.id or "<unnamed>"
    return f"Trace: {name} ({record.observation_count} observations)"


def _add_branch(
    parent_tree: Tree,
    position: int,
    observation: Observation,
    children_by_parent: dict[str | None, list[tuple[int, Observation]]],
    verbosity: Verbosity,
) -> None:
    kind = _extra(observation, "type") or "OBSERVATION"
    duration = _duration(observation)
    line = f"#{position} [{kind}] {observation.name or '<unnamed>'} ({duration})"
    level = _extra(observation, "level")
    if level and level != "DEFAULT":
        line += f" {level}"
    branch = parent_tree.add(line)

    if verbosity in ("standard", "full"):
        model = _extra(observation, "model")
        if model:
            branch.add(f"model: {model}")
        status_message = _extra(observation, "statusMessage")
        if status_message:
            branch.add(f"status: {status_message}")

    if verbosity == "full":
        if observation.input is not None:
            branch.add(f"input: {_format_data(observation.input)}")
        if observation.output is not None:
            branch.add(f"output: {_format_data(observation.output)}")

    observation_id = _extra(observation, "id")
    if observation_id is None:
        return
    for child_position, child in children_by_parent.get(observation_id, []):
        _add_branch(branch, child_position, child, children_by_parent, verbosity)


def _extra(model: Observation | TraceRecord, key: str) -> Any:
    return (model.model_extra or {}).get(key)


def _duration(observation: Observation) -> str:
    start = _parse_time(_extra(observation, "startTime"))
    end = _parse_time(_extra(observation, "endTime"))
    if start is None or end is None:
        return "running"
    if (start.tzinfo is None) != (end.tzinfo is None):
        return "running"
    return f"{(end - start).total_seconds() * 1000.0:.0f}ms"


def _parse_time(value: Any) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def _format_data(data: Any) -> str:
    """Format a value for display, truncating large values."""
    try:
        s = json.dumps(data, ensure_ascii=False)
    except (TypeError, ValueError):
        s = str(data)
    if len(s) <= _MAX_VALUE_LEN:
        return s
    return s[:_MAX_VALUE_LEN] + "... [truncated]"
