"""Run logger for recording per-query pipeline stages to JSON files."""

import dataclasses
import uuid
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from orgwatch.data import Usage


class StageRecord(BaseModel):
    """Record of a single pipeline stage execution."""

    stage: str
    component: str
    input: Any = None
    output: Any = None
    usage: dict[str, Any] | None = None
    timestamp: str = ""
    duration_seconds: float = 0.0


class RunRecord(BaseModel):
    """Record of one processed query."""

    run_id: str
    question: str
    org_hints: list[str] = []
    started_at: str
    completed_at: str | None = None
    stages: list[StageRecord] = []
    strategy: str | None = None
    confidence: float | None = None
    evidence_count: int = 0
    error: str | None = None
    total_usage: dict[str, Any] | None = None


def _serialize(obj: Any) -> Any:
    """Serialize an object to JSON-compatible format.

    Handles dataclasses, Pydantic models, enums, datetimes, sequences, dicts,
    and primitives. For Usage objects, includes computed property summaries.
    """
    if obj is None:
        return None
    if isinstance(obj, Usage):
        return {
            "api_calls": [_serialize(c) for c in obj.api_calls],
            "search_requests": dict(obj.search_requests),
            "input_tokens": obj.input_tokens,
            "output_tokens": obj.output_tokens,
            "web_searches": obj.web_searches,
            "total_search_requests": obj.total_search_requests,
        }
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: _serialize(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, (list, tuple)):
        return [_serialize(item) for item in obj]
    if isinstance(obj, dict):
        return {k: _serialize(v) for k, v in obj.items()}
    if isinstance(obj, Path):
        return str(obj)
    return obj


class RunLogger:
    """Accumulates stage records per query and writes one JSON file per run.

    Runs are keyed by the id returned from ``start_run`` so that concurrent
    queries sharing a pipeline do not interleave their records.
    When ``enabled=False``, all methods are no-ops.

    Args:
        log_dir: Directory to write JSON log files.
        enabled: If False, all methods become no-ops.
    """

    def __init__(self, log_dir: Path, *, enabled: bool = True) -> None:
        self._log_dir = log_dir
        self._enabled = enabled
        self._records: dict[str, RunRecord] = {}
        self._last_log_path: Path | None = None

    @property
    def enabled(self) -> bool:
        """Whether logging is active."""
        return self._enabled

    @property
    def last_log_path(self) -> Path | None:
        """Path to the last written log file, or None."""
        return self._last_log_path

    def start_run(self, question: str, org_hints: list[str] | tuple[str, ...] = ()) -> str | None:
        """Open a run record and return its id (None when disabled)."""
        if not self._enabled:
            return None

        run_id = str(uuid.uuid4())
        self._records[run_id] = RunRecord(
            run_id=run_id,
            question=question,
            org_hints=list(org_hints),
            started_at=datetime.now(tz=UTC).isoformat(),
        )
        return run_id

    def log_stage(
        self,
        run_id: str | None,
        stage: str,
        component: str,
        input_data: Any,
        output_data: Any,
        usage: Usage | None,
        duration_seconds: float,
    ) -> None:
        """Append a stage record to an open run.

        Args:
            run_id: Id returned by ``start_run``.
            stage: Stage name (e.g. "analysis", "augmentation").
            component: Component class name.
            input_data: Stage input (will be serialized).
            output_data: Stage output (will be serialized).
            usage: Usage object for this stage (None for non-API stages).
            duration_seconds: Wall-clock time for this stage.
        """
        record = self._records.get(run_id) if run_id else None
        if not self._enabled or record is None:
            return

        record.stages.append(
            StageRecord(
                stage=stage,
                component=component,
                input=_serialize(input_data),
                output=_serialize(output_data),
                usage=_serialize(usage) if usage is not None else None,
                timestamp=datetime.now(tz=UTC).isoformat(),
                duration_seconds=round(duration_seconds, 4),
            )
        )

    def finish_run(
        self,
        run_id: str | None,
        *,
        strategy: str | None = None,
        confidence: float | None = None,
        evidence_count: int = 0,
        usage: Usage | None = None,
        error: BaseException | None = None,
    ) -> Path | None:
        """Close a run and write its record to a JSON file.

        Returns:
            Path to the written JSON file, or None if logging is disabled.
        """
        record = self._records.pop(run_id, None) if run_id else None
        if not self._enabled or record is None:
            return None

        record.completed_at = datetime.now(tz=UTC).isoformat()
        record.strategy = strategy
        record.confidence = confidence
        record.evidence_count = evidence_count
        record.total_usage = _serialize(usage) if usage is not None else None
        if error is not None:
            record.error = f"{type(error).__name__}: {error}"

        self._log_dir.mkdir(parents=True, exist_ok=True)

        # run_2026-02-12T14-30-00_1a2b3c4d.json (colons -> dashes)
        ts = record.started_at.replace(":", "-")
        ts = ts.split(".")[0].split("+")[0]
        filepath = self._log_dir / f"run_{ts}_{record.run_id[:8]}.json"

        filepath.write_text(record.model_dump_json(indent=2))
        self._last_log_path = filepath
        return filepath
