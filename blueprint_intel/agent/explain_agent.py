"""Explain agent: reasons about why the blueprint says what it says."""

import json
import logging
from typing import Any

from blueprint_intel.llm.client import chat_json, trailing_history
from blueprint_intel.models.answer import ExplainResponse, RelatedFactor
from blueprint_intel.models.enums import DEFAULT_SECTION, Confidence, parse_section
from blueprint_intel.models.intent import ExplainIntent

logger = logging.getLogger(__name__)

EXPLAIN_HISTORY_WINDOW = 4

EXPLAIN_SYSTEM_PROMPT = """You are an expert explainer for Strategic Blueprint documents.
Your role is to explain WHY certain recommendations, scores, or assessments were made.

BLUEPRINT SECTIONS:
1. industryMarketOverview - Market landscape, pain points, psychological drivers, messaging opportunities
2. icpAnalysisValidation - ICP coherence, viability, reachability, pain-solution fit, risk assessment
3. offerAnalysisViability - Offer strength scores (1-10), red flags, recommendations
4. competitorAnalysis - Competitor profiles, ad hooks, funnel patterns, gaps and opportunities
5. crossAnalysisSynthesis - Key insights, recommended positioning, messaging angles, platform recommendations

EXPLANATION APPROACH:
1. Directly answer the "why" question with clear reasoning
2. Reference specific data points from the blueprint as evidence
3. Show how factors from different sections connect and influence each other
4. Be conversational and educational, not just a data dump
5. Identify related factors from other sections that contributed to the recommendation

CROSS-SECTION CONNECTIONS (examples):
- Industry pain points -> ICP pain-solution fit -> Messaging angles
- Competitor weaknesses -> Competitive gaps -> Positioning recommendations
- Psychological drivers -> Messaging opportunities -> Primary messaging angles
- Offer strength scores -> Risk assessment -> Strategic recommendations

RESPONSE FORMAT:
You must respond with a valid JSON object:
{
  "explanation": "Clear explanation answering the why question with supporting evidence",
  "relatedFactors": [
    {
      "section": "sectionName",
      "factor": "The specific factor or data point",
      "relevance": "How this factor influenced the recommendation"
    }
  ],
  "confidence": "high|medium|low"
}

CONFIDENCE LEVELS:
- high: Multiple data points support the explanation, clear cross-section connections
- medium: Some supporting data, but connections are inferred
- low: Limited data available, explanation is based on general principles"""


def _related_factors(raw: Any) -> list[RelatedFactor]:
    if not isinstance(raw, list):
        return []
    factors = []
    for item in raw:
        if not isinstance(item, dict):
            logger.debug("Dropping malformed related factor %r", item)
            continue
        section = parse_section(item.get("section"))
        if section is None:
            logger.warning(
                "Related factor has unknown section %r; using %s",
                item.get("section"), DEFAULT_SECTION.value,
            )
            section = DEFAULT_SECTION
        factors.append(RelatedFactor(
            section=section,
            factor=str(item.get("factor") or ""),
            relevance=str(item.get("relevance") or ""),
        ))
    return factors


def _confidence(raw: Any) -> Confidence:
    try:
        return Confidence(raw)
    except ValueError:
        return Confidence.MEDIUM


async def handle_explain(
    full_blueprint: dict,
    intent: ExplainIntent,
    chat_history: list[dict] | None = None,
) -> ExplainResponse:
    """Explain the reasoning behind a blueprint recommendation or score.

    The whole blueprint is sent, not retrieved chunks, so the model can draw
    connections across sections.
    """
    user_message = (
        "## Full Blueprint Data:\n"
        f"```json\n{json.dumps(full_blueprint, indent=2)}\n```\n\n"
        "## User's Question:\n"
        f"Section: {intent.section.value}\n"
        f"Field: {intent.field}\n"
        f'What to explain: "{intent.what_to_explain}"\n\n'
        "Analyze the blueprint data and explain WHY this recommendation/assessment was made.\n"
        "Draw connections between sections and cite specific data as evidence.\n"
        "Return ONLY the JSON response with explanation, relatedFactors, and confidence."
    )
    messages = [
        {"role": "system", "content": EXPLAIN_SYSTEM_PROMPT},
        *trailing_history(chat_history, EXPLAIN_HISTORY_WINDOW),
        {"role": "user", "content": user_message},
    ]

    response = await chat_json(messages, temperature=0.3, max_tokens=1536)
    data = response.data

    return ExplainResponse(
        explanation=str(data.get("explanation") or ""),
        related_factors=_related_factors(data.get("relatedFactors")),
        confidence=_confidence(data.get("confidence")),
        usage=response.usage,
        cost=response.cost,
    )
