"""Inspect subcommand implementation."""

from __future__ import annotations

import json
import sys
from collections import Counter
from pathlib import Path
from typing import Literal

from pydantic import ValidationError

from ..exceptions import StorageReadFailure
from ..models import TraceRecord
from ..renderers import render_trace
from ..serializers import to_compact_json
from ..storage import FileTraceCache

VerbosityArg = Literal["minimal", "standard", "full"]


def run_inspect(
    trace_id: str,
    cache_dir: Path,
    verbosity: VerbosityArg,
    *,
    as_json: bool,
    output_path: Path | None,
) -> int:
    if output_path is not None and not as_json:
        raise ValueError("--output is only supported when --json is provided")

    cache = FileTraceCache(cache_dir)
    try:
        document = cache.load(trace_id)
    except StorageReadFailure as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    if document is None:
        print(f"Error: trace {trace_id} not found in cache {cache_dir}", file=sys.stderr)
        return 1
    if not isinstance(document.get("observations"), list):
        print(f"Error: invalid trace data structure for trace {trace_id}", file=sys.stderr)
        return 1
    try:
        record = TraceRecord.model_validate(document)
    except ValidationError as exc:
        print(f"Error: invalid trace data for {trace_id}: {exc}", file=sys.stderr)
        return 1
    summary = _build_summary(record, document)

    if as_json:
        payload = json.dumps(summary, ensure_ascii=True, sort_keys=True)
        if output_path is not None:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(payload + "\n", encoding="utf-8")
        else:
            print(payload)
        return 0

    print(f"Trace ID: {summary['trace_id']}")
    print(f"Name: {summary['name'] or '<unnamed>'}")
    print(f"Observations: {summary['observation_count']}")
    print(f"Size: {summary['size_bytes']} bytes")
    print("Observation type counts:")
    for kind, count in summary["type_counts"].items():
        print(f"  - {kind}: {count}")
    print()
    print(render_trace(record, verbosity=verbosity))
    return 0


def run_cached(cache_dir: Path) -> int:
    for trace_id in FileTraceCache(cache_dir).list_traces():
        print(trace_id)
    return 0


def _build_summary(record: TraceRecord, document: dict[str, object]) -> dict[str, object]:
    extra = record.model_extra or {}
    type_counts = Counter(
        str((observation.model_extra or {}).get("type") or "OBSERVATION")
        for observation in record.observations
    )
    name_counts = Counter(observation.name or "<unnamed>" for observation in record.observations)
    size_bytes = len(to_compact_json(document).encode("utf-8"))

    return {
        "trace_id": record.id,
        "name": extra.get("name") or "",
        "observation_count": record.observation_count,
        "size_bytes": size_bytes,
        "type_counts": dict(sorted(type_counts.items())),
        "name_counts": dict(sorted(name_counts.items())),
    }
