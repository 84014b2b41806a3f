"""Unit tests for chat graph routing and usage accumulation."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from blueprint_intel.agent.confidence import build_source_quality, calculate_confidence
from blueprint_intel.agent.graph import _route_after_classify, build_chat_graph
from blueprint_intel.llm.usage import Usage
from blueprint_intel.models.answer import (
    EditResponse,
    EditResult,
    ExplainResponse,
    QAResponse,
    RelatedFactor,
)
from blueprint_intel.models.enums import BlueprintSection, Confidence
from blueprint_intel.models.intent import (
    EditIntent,
    ExplainIntent,
    GeneralIntent,
    IntentClassificationResult,
    QuestionIntent,
    RegenerateIntent,
)
from blueprint_intel.retrieval.retriever import RetrievalResult

SYNTHESIS = BlueprintSection.CROSS_ANALYSIS_SYNTHESIS


def _classified(intent):
    return IntentClassificationResult(intent=intent, usage=Usage(40, 10, 50), cost=0.001)


@pytest.fixture
def retriever(chunk_factory):
    mock = MagicMock()
    mock.retrieve = AsyncMock(return_value=RetrievalResult(
        chunks=[chunk_factory(similarity=0.8)],
        embedding_cost=0.0001,
    ))
    return mock


def _state(sample_blueprint, message):
    return {
        "message": message,
        "blueprint_id": "bp-1",
        "blueprint": sample_blueprint,
        "chat_history": [],
        "tokens_used": 0,
        "cost": 0.0,
    }


class TestRouteAfterClassify:

    @pytest.mark.parametrize("intent,expected", [
        (QuestionIntent(topic="x"), "answer_question"),
        (GeneralIntent(), "answer_question"),
        (EditIntent(section=SYNTHESIS), "propose_edit"),
        (ExplainIntent(section=SYNTHESIS), "explain"),
        (RegenerateIntent(section=SYNTHESIS), "acknowledge_regenerate"),
        (None, "answer_question"),
    ])
    def test_routes(self, intent, expected):
        assert _route_after_classify({"intent": intent}) == expected


class TestChatGraph:
    """Run whole chat turns with every model call mocked."""

    @pytest.mark.asyncio
    async def test_question_turn(self, retriever, sample_blueprint, chunk_factory):
        chunks = [chunk_factory(similarity=0.8)]
        qa = QAResponse(
            answer="Deadline certainty.",
            sources=chunks,
            confidence=Confidence.MEDIUM,
            confidence_result=calculate_confidence(chunks),
            source_quality=build_source_quality(chunks),
            usage=Usage(200, 20, 220),
            cost=0.002,
        )
        with patch("blueprint_intel.agent.nodes.classify_intent",
                   new=AsyncMock(return_value=_classified(QuestionIntent(topic="positioning")))), \
             patch("blueprint_intel.agent.nodes.answer_question", new=AsyncMock(return_value=qa)):
            graph = build_chat_graph(retriever)
            result = await graph.ainvoke(_state(sample_blueprint, "What is our positioning?"))

        retriever.retrieve.assert_awaited_once_with(
            "bp-1", "What is our positioning?", match_threshold=0.65, match_count=5,
        )
        assert result["response"] == "Deadline certainty."
        assert result["confidence"] == "medium"
        assert result["sources"] == chunks
        assert result["tokens_used"] == 270
        assert result["cost"] == pytest.approx(0.001 + 0.002 + 0.0001)

    @pytest.mark.asyncio
    async def test_edit_turn_passes_section_slice(self, retriever, sample_blueprint):
        intent = EditIntent(section=SYNTHESIS, field="nextSteps", desired_change="add webinar")
        edit = EditResponse(
            result=EditResult(
                section=SYNTHESIS,
                field_path="nextSteps",
                old_value=["Build case studies", "Launch LinkedIn pilot"],
                new_value=["Build case studies", "Launch LinkedIn pilot", "Run webinar"],
                explanation="Adds a webinar",
                diff_preview="- Old: ...\n+ New: ...",
            ),
            usage=Usage(300, 40, 340),
            cost=0.003,
        )
        handle_edit = AsyncMock(return_value=edit)
        with patch("blueprint_intel.agent.nodes.classify_intent",
                   new=AsyncMock(return_value=_classified(intent))), \
             patch("blueprint_intel.agent.nodes.handle_edit", new=handle_edit):
            result = await build_chat_graph(retriever).ainvoke(
                _state(sample_blueprint, "Add a webinar to next steps")
            )

        section_arg, intent_arg, _ = handle_edit.await_args.args
        assert section_arg == sample_blueprint["crossAnalysisSynthesis"]
        assert intent_arg == intent
        assert result["edit_result"].requires_confirmation is True
        assert "Adds a webinar" in result["response"]
        assert result["tokens_used"] == 390
        retriever.retrieve.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_explain_turn(self, retriever, sample_blueprint):
        intent = ExplainIntent(section=SYNTHESIS, what_to_explain="why LinkedIn")
        factor = RelatedFactor(section=BlueprintSection.ICP_ANALYSIS_VALIDATION, factor="f", relevance="r")
        explained = ExplainResponse(
            explanation="Because ops leaders live there.",
            related_factors=[factor],
            confidence=Confidence.HIGH,
            usage=Usage(900, 100, 1000),
            cost=0.004,
        )
        handle_explain = AsyncMock(return_value=explained)
        with patch("blueprint_intel.agent.nodes.classify_intent",
                   new=AsyncMock(return_value=_classified(intent))), \
             patch("blueprint_intel.agent.nodes.handle_explain", new=handle_explain):
            result = await build_chat_graph(retriever).ainvoke(_state(sample_blueprint, "Why LinkedIn?"))

        assert handle_explain.await_args.args[0] == sample_blueprint
        assert result["response"] == "Because ops leaders live there."
        assert result["confidence"] == "high"
        assert result["related_factors"] == [factor]
        assert result["tokens_used"] == 1050

    @pytest.mark.asyncio
    async def test_regenerate_turn_acknowledges(self, retriever, sample_blueprint):
        intent = RegenerateIntent(section=BlueprintSection.COMPETITOR_ANALYSIS, instructions="focus on SMB tools")
        with patch("blueprint_intel.agent.nodes.classify_intent",
                   new=AsyncMock(return_value=_classified(intent))):
            result = await build_chat_graph(retriever).ainvoke(_state(sample_blueprint, "Redo competitors"))

        assert result["response"] == (
            "Regeneration of the Competitor Analysis section has been requested. "
            "Instructions: focus on SMB tools"
        )
        assert result["tokens_used"] == 50
