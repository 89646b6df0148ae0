"""Tests for RunLogger and serialization helpers."""

import json
from datetime import UTC, datetime
from pathlib import Path

from orgwatch.data import (
    APICallUsage,
    EvidenceItem,
    EvidenceOrigin,
    QueryAnalysis,
    QueryType,
    ResponseStrategy,
    Usage,
)
from orgwatch.run_logger import RunLogger, _serialize

# -- _serialize tests --


def test_serialize_none() -> None:
    assert _serialize(None) is None


def test_serialize_primitive() -> None:
    assert _serialize(42) == 42
    assert _serialize("hello") == "hello"
    assert _serialize(3.14) == 3.14
    assert _serialize(True) is True


def test_serialize_list_and_dict() -> None:
    assert _serialize([1, "two", None]) == [1, "two", None]
    assert _serialize({"a": 1, "b": (2, 3)}) == {"a": 1, "b": [2, 3]}


def test_serialize_dataclass_with_enum_and_nested_values() -> None:
    analysis = QueryAnalysis(
        query_type=QueryType.FINANCIAL,
        company_names=("Raytheon Technologies",),
        keywords=("revenue",),
    )
    result = _serialize(analysis)
    assert result["query_type"] == "financial"
    assert result["company_names"] == ["Raytheon Technologies"]
    assert result["time_window"] is None


def test_serialize_evidence_datetime() -> None:
    item = EvidenceItem(
        origin=EvidenceOrigin.WEB,
        title="t",
        url="https://example.com",
        published_at=datetime(2026, 10, 1, tzinfo=UTC),
    )
    result = _serialize(item)
    assert result["origin"] == "web"
    assert result["published_at"] == "2026-10-01T00:00:00+00:00"


def test_serialize_usage_includes_computed_properties() -> None:
    usage = Usage(
        api_calls=[
            APICallUsage(model="m1", input_tokens=100, output_tokens=50, web_searches=1),
            APICallUsage(model="m2", input_tokens=200, output_tokens=75, web_searches=2),
        ],
        search_requests={"gnews": 3, "duckduckgo": 1},
    )
    result = _serialize(usage)
    assert result["input_tokens"] == 300
    assert result["output_tokens"] == 125
    assert result["web_searches"] == 3
    assert result["search_requests"] == {"gnews": 3, "duckduckgo": 1}
    assert result["total_search_requests"] == 4
    assert len(result["api_calls"]) == 2


def test_serialize_path() -> None:
    assert _serialize(Path("/some/path")) == "/some/path"


# -- RunLogger disabled tests --


def test_run_logger_disabled_is_noop(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path, enabled=False)
    assert not logger.enabled

    run_id = logger.start_run("How is RTX doing?")
    logger.log_stage(run_id, "analysis", "TestComponent", "input", "output", None, 1.0)
    result = logger.finish_run(run_id)

    assert run_id is None
    assert result is None
    assert logger.last_log_path is None
    assert list(tmp_path.iterdir()) == []


# -- RunLogger enabled tests --


def test_run_logger_start_and_finish(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path, enabled=True)

    run_id = logger.start_run("How is RTX doing?", ["Raytheon Technologies"])
    path = logger.finish_run(
        run_id, strategy=str(ResponseStrategy.LOCAL_EVIDENCE), confidence=0.9, evidence_count=4
    )

    assert path is not None
    assert path.exists()
    assert path.suffix == ".json"
    assert logger.last_log_path == path

    data = json.loads(path.read_text())
    assert data["question"] == "How is RTX doing?"
    assert data["org_hints"] == ["Raytheon Technologies"]
    assert data["strategy"] == "local-evidence"
    assert data["confidence"] == 0.9
    assert data["evidence_count"] == 4
    assert data["completed_at"] is not None


def test_run_logger_log_stages(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path, enabled=True)
    run_id = logger.start_run("How is RTX doing?")

    usage = Usage(
        api_calls=[APICallUsage(model="claude-haiku-4-5", input_tokens=100, output_tokens=50)]
    )
    logger.log_stage(
        run_id,
        stage="analysis",
        component="LLMQueryAnalyzer",
        input_data="How is RTX doing?",
        output_data=QueryAnalysis(company_names=("Raytheon Technologies",)),
        usage=usage,
        duration_seconds=0.5,
    )
    logger.log_stage(
        run_id,
        stage="strategy",
        component="ConfidenceGate",
        input_data={"evidence_count": 0},
        output_data=ResponseStrategy.WEB_AUGMENTED,
        usage=None,
        duration_seconds=0.001,
    )
    path = logger.finish_run(run_id, usage=usage)

    assert path is not None
    data = json.loads(path.read_text())

    assert [s["stage"] for s in data["stages"]] == ["analysis", "strategy"]
    assert data["stages"][0]["component"] == "LLMQueryAnalyzer"
    assert data["stages"][0]["usage"]["input_tokens"] == 100
    assert data["stages"][0]["output"]["company_names"] == ["Raytheon Technologies"]
    assert data["stages"][1]["usage"] is None
    assert data["stages"][1]["output"] == "web-augmented"
    assert data["total_usage"]["input_tokens"] == 100


def test_concurrent_runs_do_not_interleave(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path, enabled=True)
    first = logger.start_run("first")
    second = logger.start_run("second")

    logger.log_stage(first, "analysis", "A", "first", None, None, 0.1)
    logger.log_stage(second, "analysis", "A", "second", None, None, 0.1)
    logger.log_stage(second, "retrieval", "R", "second", None, None, 0.1)

    first_data = json.loads(logger.finish_run(first).read_text())
    second_data = json.loads(logger.finish_run(second).read_text())

    assert len(first_data["stages"]) == 1
    assert len(second_data["stages"]) == 2


def test_run_logger_records_error(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path, enabled=True)
    run_id = logger.start_run("How is RTX doing?")
    path = logger.finish_run(run_id, error=RuntimeError("boom"))

    assert path is not None
    assert json.loads(path.read_text())["error"] == "RuntimeError: boom"


def test_run_logger_creates_log_dir(tmp_path: Path) -> None:
    log_dir = tmp_path / "nested" / "logs"
    logger = RunLogger(log_dir=log_dir, enabled=True)

    path = logger.finish_run(logger.start_run("q"))

    assert path is not None
    assert log_dir.exists()


def test_run_logger_filename_format(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path, enabled=True)
    path = logger.finish_run(logger.start_run("q"))

    assert path is not None
    assert path.name.startswith("run_")
    assert path.name.endswith(".json")
    # Should not contain colons (filesystem-unsafe)
    assert ":" not in path.name


def test_run_logger_unknown_run_is_ignored(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path, enabled=True)
    logger.log_stage("missing", "analysis", "A", "input", "output", None, 1.0)
    assert logger.finish_run("missing") is None
    assert logger.finish_run(None) is None
