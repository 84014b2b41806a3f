"""Intent classification for routing chat messages to agents.

The model is asked for JSON, but its output is never trusted as-is:
``parse_intent_response`` rebuilds a strictly typed ChatIntent, replacing
unknown sections with safe defaults and falling back to a general intent.
"""

import logging
from typing import Any

from blueprint_intel.llm.client import chat, parse_json_object
from blueprint_intel.models.enums import DEFAULT_SECTION, BlueprintSection, parse_section
from blueprint_intel.models.intent import (
    ChatIntent,
    EditIntent,
    ExplainIntent,
    GeneralIntent,
    IntentClassificationResult,
    QuestionIntent,
    RegenerateIntent,
)

logger = logging.getLogger(__name__)

INTENT_SYSTEM_PROMPT = """You are an intent classifier for a Strategic Blueprint document system.

The blueprint has 5 sections:
1. industryMarketOverview - Market landscape, pain points, psychological drivers, messaging opportunities
2. icpAnalysisValidation - ICP coherence check, viability, reachability, pain-solution fit, risk assessment
3. offerAnalysisViability - Offer strength scores (1-10), red flags, recommendations
4. competitorAnalysis - Competitor profiles, ad hooks, funnel patterns, gaps and opportunities
5. crossAnalysisSynthesis - Key insights, recommended positioning, messaging angles, platform recommendations, next steps

Classify the user's message into one of these intents:
- question: User wants information from the blueprint (asking what, who, how many, etc.)
- edit: User wants to change/modify something in the blueprint (update, change, fix, modify)
- explain: User wants to understand WHY something is the way it is (why, reasoning, explain)
- regenerate: User wants to redo/recreate a section with new instructions (redo, regenerate, rewrite)
- general: General conversation, greetings, or unclear intent

Respond with ONLY a JSON object (no markdown, no explanation) with this structure:
{
  "type": "question|edit|explain|regenerate|general",
  "topic": "what they're asking about (for question/general)",
  "sections": ["relevant section names"] (for question - array of section names),
  "section": "specific section name" (for edit/explain/regenerate - single section),
  "field": "specific field path if known" (for edit/explain),
  "desiredChange": "what they want changed" (for edit),
  "whatToExplain": "what needs explanation" (for explain),
  "instructions": "special instructions" (for regenerate)
}

Include only the fields relevant to the classified intent type."""


def _str(value: Any, default: str = "") -> str:
    return value if isinstance(value, str) and value else default


def _single_section(raw: dict) -> BlueprintSection:
    section = parse_section(raw.get("section"))
    if section is None:
        logger.warning(
            "Classifier returned unknown section %r for %s intent; using %s",
            raw.get("section"), raw.get("type"), DEFAULT_SECTION.value,
        )
        return DEFAULT_SECTION
    return section


def _valid_sections(raw_sections: Any) -> tuple[BlueprintSection, ...]:
    if not isinstance(raw_sections, list):
        return ()
    sections = []
    for raw in raw_sections:
        section = parse_section(raw)
        if section is None:
            logger.debug("Dropping unknown section %r from question intent", raw)
        elif section not in sections:
            sections.append(section)
    return tuple(sections)


def parse_intent_response(raw: Any) -> ChatIntent:
    """Turn untrusted classifier output into a typed ChatIntent.

    Single-section intents keep their type and fields when the section is
    unknown; only the section is replaced with the synthesis section.
    """
    if not isinstance(raw, dict):
        return GeneralIntent(topic="unknown")

    intent_type = raw.get("type")

    if intent_type == "question":
        return QuestionIntent(
            topic=_str(raw.get("topic"), "unknown"),
            sections=_valid_sections(raw.get("sections")),
        )
    if intent_type == "edit":
        return EditIntent(
            section=_single_section(raw),
            field=_str(raw.get("field")),
            desired_change=_str(raw.get("desiredChange")),
        )
    if intent_type == "explain":
        return ExplainIntent(
            section=_single_section(raw),
            field=_str(raw.get("field")),
            what_to_explain=_str(raw.get("whatToExplain")),
        )
    if intent_type == "regenerate":
        return RegenerateIntent(
            section=_single_section(raw),
            instructions=_str(raw.get("instructions")),
        )
    return GeneralIntent(topic=_str(raw.get("topic"), "conversation"))


async def classify_intent(message: str) -> IntentClassificationResult:
    """Classify a user message into an intent for agent routing.

    Temperature 0 for deterministic classification. Always returns an
    intent: unparseable model output becomes a general intent.
    """
    response = await chat(
        [
            {"role": "system", "content": INTENT_SYSTEM_PROMPT},
            {"role": "user", "content": message},
        ],
        temperature=0,
        max_tokens=256,
        json_mode=True,
    )

    parsed = parse_json_object(response.content)
    if parsed is None:
        logger.debug("Intent JSON parse failed, defaulting to general intent")
        intent = GeneralIntent(topic="unknown")
    else:
        intent = parse_intent_response(parsed)

    return IntentClassificationResult(
        intent=intent,
        usage=response.usage,
        cost=response.cost,
    )
