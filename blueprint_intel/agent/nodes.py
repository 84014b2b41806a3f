"""Agent graph nodes for one blueprint chat turn."""

import logging

from config.settings import get_settings
from blueprint_intel.agent.edit_agent import handle_edit
from blueprint_intel.agent.explain_agent import handle_explain
from blueprint_intel.agent.intent_router import classify_intent
from blueprint_intel.agent.qa_agent import answer_question
from blueprint_intel.agent.state import ChatState
from blueprint_intel.models.enums import SECTION_TITLES
from blueprint_intel.models.intent import (
    EditIntent,
    ExplainIntent,
    RegenerateIntent,
)
from blueprint_intel.retrieval.retriever import BlueprintRetriever

logger = logging.getLogger(__name__)


def _accumulate(state: ChatState, tokens: int, cost: float) -> dict:
    return {
        "tokens_used": state.get("tokens_used", 0) + tokens,
        "cost": state.get("cost", 0.0) + cost,
    }


async def classify_message(state: ChatState) -> dict:
    """Classify the user's message into a ChatIntent."""
    result = await classify_intent(state["message"])
    logger.info("Classified message as %s intent", result.intent.type.value)
    return {
        "intent": result.intent,
        **_accumulate(state, result.usage.total_tokens, result.cost),
    }


async def answer_from_blueprint(state: ChatState, retriever: BlueprintRetriever) -> dict:
    """Retrieve relevant chunks and answer from them (question and general intents)."""
    settings = get_settings()
    retrieval = await retriever.retrieve(
        state["blueprint_id"],
        state["message"],
        match_threshold=settings.blueprint_chat_match_threshold,
        match_count=settings.blueprint_match_count,
    )
    qa = await answer_question(
        state["message"],
        retrieval.chunks,
        state.get("chat_history") or [],
    )
    accumulated = _accumulate(state, qa.usage.total_tokens, qa.cost + retrieval.embedding_cost)
    return {
        "response": qa.answer,
        "confidence": qa.confidence.value,
        "confidence_explanation": qa.confidence_result.explanation,
        "source_quality": qa.source_quality.explanation,
        "sources": qa.sources,
        **accumulated,
    }


async def propose_edit(state: ChatState) -> dict:
    """Propose a field-level edit to the intent's section; nothing is applied."""
    intent: EditIntent = state["intent"]
    section_data = (state.get("blueprint") or {}).get(intent.section.value) or {}
    edit = await handle_edit(section_data, intent, state.get("chat_history") or [])
    result = edit.result
    response = (
        f"{result.explanation}\n\n{result.diff_preview}\n\n"
        "Confirm to apply this change."
    )
    return {
        "response": response,
        "edit_result": result,
        **_accumulate(state, edit.usage.total_tokens, edit.cost),
    }


async def explain_reasoning(state: ChatState) -> dict:
    """Explain a recommendation using the whole blueprint."""
    intent: ExplainIntent = state["intent"]
    explained = await handle_explain(
        state.get("blueprint") or {},
        intent,
        state.get("chat_history") or [],
    )
    return {
        "response": explained.explanation,
        "confidence": explained.confidence.value,
        "related_factors": explained.related_factors,
        **_accumulate(state, explained.usage.total_tokens, explained.cost),
    }


def acknowledge_regenerate(state: ChatState) -> dict:
    """Acknowledge a regeneration request; regeneration runs outside the chat turn."""
    intent: RegenerateIntent = state["intent"]
    title = SECTION_TITLES[intent.section]
    response = f"Regeneration of the {title} section has been requested."
    if intent.instructions:
        response += f" Instructions: {intent.instructions}"
    return {"response": response}

