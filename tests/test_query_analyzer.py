"""Tests for the model-assisted and heuristic query analyzers."""

import json
from datetime import UTC, datetime

import pytest

from conftest import NOW, FakeClock, FakeTextGenerator, failing_generator
from orgwatch.data import QueryType, Usage
from orgwatch.errors import AnalysisError
from orgwatch.generation import ANALYSIS_PARAMS
from orgwatch.query import HeuristicQueryAnalyzer, LLMQueryAnalyzer, heuristic_analysis
from orgwatch.query.heuristic import extract_keywords, resolve_period
from orgwatch.roster import Roster


def _analyzer(reply: str, roster: Roster) -> tuple[LLMQueryAnalyzer, FakeTextGenerator]:
    generator = FakeTextGenerator(reply)
    return LLMQueryAnalyzer(generator, roster, clock=FakeClock()), generator


class TestLLMQueryAnalyzer:
    async def test_parses_well_formed_output(self, roster: Roster) -> None:
        reply = json.dumps(
            {
                "query_type": "contracts",
                "company_names": ["Lockheed Martin"],
                "keywords": ["f-35", "award"],
                "time_window": "recent",
                "search_terms": ["F-35 contract"],
            }
        )
        analyzer, _ = _analyzer(reply, roster)
        analysis, usage = await analyzer.analyze("Any new F-35 awards?")

        assert analysis.query_type == QueryType.CONTRACTS
        assert analysis.company_names == ("Lockheed Martin",)
        assert analysis.keywords == ("f-35", "award")
        assert analysis.search_terms == ("F-35 contract",)
        assert analysis.time_window is not None
        assert analysis.time_window.period == "recent"
        assert analysis.time_window.end == NOW
        assert len(usage.api_calls) == 1

    async def test_uses_analysis_params_and_roster_prompt(self, roster: Roster) -> None:
        analyzer, generator = _analyzer("{}", roster)
        await analyzer.analyze("How is RTX doing?")

        call = generator.calls[0]
        assert call["max_tokens"] == ANALYSIS_PARAMS.max_tokens
        assert call["temperature"] == ANALYSIS_PARAMS.temperature
        assert "Raytheon Technologies" in call["system"]
        assert "{organizations}" not in call["system"]
        assert call["prompt"] == "How is RTX doing?"

    async def test_strips_code_fences(self, roster: Roster) -> None:
        reply = '```json\n{"query_type": "news", "company_names": ["US War Department"]}\n```'
        analyzer, _ = _analyzer(reply, roster)
        analysis, _ = await analyzer.analyze("What did the Pentagon announce?")

        assert analysis.query_type == QueryType.NEWS
        assert analysis.company_names == ("US War Department",)

    async def test_malformed_output_falls_back_to_heuristics(self, roster: Roster) -> None:
        analyzer, _ = _analyzer("Sorry, I cannot help with that.", roster)
        analysis, _ = await analyzer.analyze("What were RTX quarterly earnings?")

        assert analysis.query_type == QueryType.FINANCIAL
        assert analysis.company_names == ("Raytheon Technologies",)
        assert "earnings" in analysis.keywords

    async def test_invalid_fields_fall_back_individually(self, roster: Roster) -> None:
        reply = json.dumps(
            {
                "query_type": "gossip",
                "company_names": "RTX",
                "keywords": ["missiles"],
                "time_window": {"start": "not a date"},
            }
        )
        analyzer, _ = _analyzer(reply, roster)
        analysis, _ = await analyzer.analyze("Latest Raytheon contract news this month")

        # query_type invalid -> heuristic; keywords valid -> kept
        assert analysis.query_type == QueryType.CONTRACTS
        assert analysis.keywords == ("missiles",)
        assert analysis.company_names == ("Raytheon Technologies",)
        assert analysis.time_window is not None
        assert analysis.time_window.period == "this_month"

    async def test_model_type_used_when_keywords_are_silent(self, roster: Roster) -> None:
        analyzer, _ = _analyzer('{"query_type": "contracts"}', roster)
        analysis, _ = await analyzer.analyze("What is Lockheed building for the Army?")
        assert analysis.query_type == QueryType.CONTRACTS

    async def test_general_type_is_refined_by_heuristics(self, roster: Roster) -> None:
        analyzer, _ = _analyzer('{"query_type": "general"}', roster)
        analysis, _ = await analyzer.analyze("RTX revenue outlook")
        assert analysis.query_type == QueryType.FINANCIAL

    async def test_unknown_organizations_are_dropped(self, roster: Roster) -> None:
        reply = json.dumps({"company_names": ["Acme Corp", "raytheon"]})
        analyzer, _ = _analyzer(reply, roster)
        analysis, _ = await analyzer.analyze("Compare Acme and Raytheon")
        assert analysis.company_names == ("Raytheon Technologies",)

    async def test_explicit_time_window(self, roster: Roster) -> None:
        reply = json.dumps(
            {"time_window": {"start": "2026-01-01T00:00:00Z", "end": "2026-03-31T00:00:00Z"}}
        )
        analyzer, _ = _analyzer(reply, roster)
        analysis, _ = await analyzer.analyze("RTX news in Q1")

        assert analysis.time_window is not None
        assert analysis.time_window.start == datetime(2026, 1, 1, tzinfo=UTC)
        assert analysis.time_window.end == datetime(2026, 3, 31, tzinfo=UTC)

    async def test_generation_failure_is_fatal(self, roster: Roster) -> None:
        analyzer = LLMQueryAnalyzer(failing_generator(), roster)
        with pytest.raises(AnalysisError):
            await analyzer.analyze("How is RTX doing?")


@pytest.mark.parametrize(
    ("question", "organization"),
    [
        ("What were RTX earnings last quarter?", "Raytheon Technologies"),
        ("raytheon revenue growth", "Raytheon Technologies"),
        ("Department of War financial report", "US War Department"),
        ("Lockheed quarterly profit", "Lockheed Martin"),
        ("How did LMT stock do?", "Lockheed Martin"),
    ],
)
@pytest.mark.parametrize(
    "reply",
    [
        "not json",
        '{"query_type": "news", "company_names": ["Raytheon Technologies"]}',
        '{"query_type": "contracts"}',
        '{"query_type": "comparison", "company_names": ["Lockheed Martin"]}',
        '{"query_type": "general"}',
    ],
)
async def test_alias_plus_financial_keyword(
    roster: Roster, question: str, organization: str, reply: str
) -> None:
    # Whatever the model says, the alias and the financial keyword win.
    analyzer, _ = _analyzer(reply, roster)
    analysis, _ = await analyzer.analyze(question)

    assert analysis.query_type == QueryType.FINANCIAL
    assert organization in analysis.company_names


# -- heuristics --


def test_heuristic_analysis_detects_contracts(roster: Roster) -> None:
    analysis = heuristic_analysis("Was Raytheon awarded a new contract?", roster, NOW)
    assert analysis.query_type == QueryType.CONTRACTS
    assert analysis.company_names == ("Raytheon Technologies",)


def test_heuristic_analysis_general_without_keywords(roster: Roster) -> None:
    analysis = heuristic_analysis("Who leads RTX?", roster, NOW)
    assert analysis.query_type == QueryType.GENERAL
    assert analysis.time_window is None


def test_alias_match_is_whole_word(roster: Roster) -> None:
    analysis = heuristic_analysis("Tell me about artxyz", roster, NOW)
    assert analysis.company_names == ()


def test_resolve_period_this_quarter() -> None:
    window = resolve_period("this_quarter", NOW)
    assert window is not None
    assert window.start == datetime(2026, 10, 1, tzinfo=UTC)
    assert window.end == NOW


def test_resolve_period_unknown() -> None:
    assert resolve_period("last_decade", NOW) is None


def test_extract_keywords_drops_stopwords() -> None:
    assert extract_keywords("What is the RTX revenue for this year?") == [
        "rtx",
        "revenue",
        "year",
    ]


async def test_heuristic_analyzer_makes_no_calls(roster: Roster) -> None:
    analyzer = HeuristicQueryAnalyzer(roster, clock=FakeClock())
    analysis, usage = await analyzer.analyze("Latest Pentagon news")

    assert analysis.query_type == QueryType.NEWS
    assert analysis.company_names == ("US War Department",)
    assert usage == Usage()
