"""Edit agent: turns a natural-language edit request into a proposed field change.

The model proposes ``fieldPath``, ``oldValue``, ``newValue`` and an
explanation. Its ``oldValue`` is not trusted; the current value is resolved
from the real section data. The diff preview is rendered locally so it stays
deterministic, and every proposal requires user confirmation.
"""

import json
import logging
import re
from typing import Any

from blueprint_intel.llm.client import chat_json, trailing_history
from blueprint_intel.models.answer import EditResponse, EditResult
from blueprint_intel.models.intent import EditIntent

logger = logging.getLogger(__name__)

EDIT_HISTORY_WINDOW = 4
MAX_PREVIEW_STRING = 100

# Returned by get_value_at_path when a path does not resolve
MISSING = object()

_SEGMENT_PATTERN = re.compile(r"([^\[\]]*)((?:\[\d+\])*)")

EDIT_SYSTEM_PROMPT = """You are an expert editor for Strategic Blueprint documents.
Your role is to interpret user edit requests and generate precise field-level changes.

RULES:
1. Identify the EXACT field to edit based on the user's request
2. The fieldPath must use dot notation with bracketed array indices (e.g., "recommendedPositioning", "painPoints.primary[0]")
3. The new value MUST match the original data type exactly:
   - If original is a string, new value must be a string
   - If original is an array, new value must be an array
   - If original is a number, new value must be a number
   - If original is an object, new value must be an object with same structure
4. Provide a clear explanation of WHY this change addresses the user's request
5. Be conservative - only change what the user asked for

RESPONSE FORMAT:
Respond with ONLY a JSON object (no markdown, no explanation):
{
  "fieldPath": "string - dot notation path to field",
  "oldValue": "current value (any type)",
  "newValue": "proposed new value (same type as oldValue)",
  "explanation": "string - why this change addresses the request"
}

AVAILABLE SECTIONS AND THEIR COMMON FIELDS:

industryMarketOverview:
- categorySnapshot (object with category, marketMaturity, awarenessLevel, buyingBehavior, averageSalesCycle, seasonality)
- painPoints (object with primary[], secondary[])
- psychologicalDrivers (object with drivers[] of {driver, description})
- audienceObjections (object with objections[] of {objection, howToAddress})
- messagingOpportunities (object with opportunities[], summaryRecommendations[])

icpAnalysisValidation:
- painSolutionFit (object with primaryPain, offerComponentSolvingIt, fitAssessment, notes)
- finalVerdict (object with status, reasoning, recommendations[])

offerAnalysisViability:
- offerStrength (object with painRelevance, urgency, differentiation, tangibility, proof, pricingLogic scores 1-10)
- redFlags (string[])
- recommendation (object with status, reasoning, actionItems[])

competitorAnalysis:
- competitors (array of competitor objects with name, positioning, offer, price, strengths[], weaknesses[])
- gapsAndOpportunities (object with messagingOpportunities[], creativeOpportunities[], funnelOpportunities[])

crossAnalysisSynthesis:
- keyInsights (array of {insight, source, implication, priority})
- recommendedPositioning (string)
- primaryMessagingAngles (string[])
- recommendedPlatforms (array of {platform, reasoning, priority})
- nextSteps (string[])"""


def parse_field_path(path: str) -> list[str | int]:
    """Split ``painPoints.primary[0]`` (or ``painPoints.primary.0``) into keys and indices."""
    parts: list[str | int] = []
    for segment in path.split("."):
        match = _SEGMENT_PATTERN.fullmatch(segment)
        if match is None:
            parts.append(segment)
            continue
        name, indices = match.groups()
        if name:
            parts.append(int(name) if name.isdigit() else name)
        parts.extend(int(i) for i in re.findall(r"\d+", indices))
    return parts


def _step(current: Any, part: str | int) -> Any:
    if isinstance(part, int):
        if isinstance(current, list):
            return current[part] if 0 <= part < len(current) else MISSING
        part = str(part)
    if isinstance(current, dict):
        return current.get(part, MISSING)
    return MISSING


def get_value_at_path(obj: Any, path: str) -> Any:
    """Return the value at ``path`` in ``obj``, or ``MISSING`` if it does not resolve."""
    if not path:
        return MISSING
    current = obj
    for part in parse_field_path(path):
        current = _step(current, part)
        if current is MISSING:
            return MISSING
    return current


def set_value_at_path(obj: Any, path: str, value: Any) -> None:
    """Write ``value`` at ``path`` in place.

    The final key may be new on an existing object; every parent must exist
    and list indices must be in range.

    Raises:
        KeyError: If the path does not resolve to a writable location.
    """
    parts = parse_field_path(path) if path else []
    if not parts:
        raise KeyError(path)

    parent = obj
    for part in parts[:-1]:
        parent = _step(parent, part)
        if parent is MISSING:
            raise KeyError(path)

    last = parts[-1]
    if isinstance(parent, list) and isinstance(last, int) and 0 <= last < len(parent):
        parent[last] = value
    elif isinstance(parent, dict):
        parent[str(last) if isinstance(last, int) else last] = value
    else:
        raise KeyError(path)


def _format_preview_value(value: Any) -> str:
    if isinstance(value, str):
        if len(value) > MAX_PREVIEW_STRING:
            return f'"{value[:MAX_PREVIEW_STRING - 3]}..."'
        return f'"{value}"'
    if isinstance(value, list):
        if not value:
            return "[]"
        if all(isinstance(v, str) for v in value):
            return "[" + ", ".join(f'"{v}"' for v in value) + "]"
        return f"[{len(value)} items]"
    if isinstance(value, dict):
        return json.dumps(value, indent=2)
    return json.dumps(value)


def generate_diff_preview(old_value: Any, new_value: Any) -> str:
    """Render a two-line ``- Old`` / ``+ New`` preview of a change."""
    return f"- Old: {_format_preview_value(old_value)}\n+ New: {_format_preview_value(new_value)}"


async def handle_edit(
    full_section: dict,
    intent: EditIntent,
    chat_history: list[dict] | None = None,
) -> EditResponse:
    """Propose a field-level edit to ``full_section``; never mutates it."""
    user_message = (
        f"## Current Section Data ({intent.section.value}):\n"
        f"```json\n{json.dumps(full_section, indent=2)}\n```\n\n"
        "## User's Edit Request:\n"
        f'Field hint: "{intent.field}"\n'
        f'Desired change: "{intent.desired_change}"\n\n'
        "Analyze the section data and generate the precise field-level edit to address this request.\n"
        "Return ONLY the JSON response with fieldPath, oldValue, newValue, and explanation."
    )
    messages = [
        {"role": "system", "content": EDIT_SYSTEM_PROMPT},
        *trailing_history(chat_history, EDIT_HISTORY_WINDOW),
        {"role": "user", "content": user_message},
    ]

    # Low temperature for precision
    response = await chat_json(messages, temperature=0.2, max_tokens=2048)
    data = response.data

    field_path = data.get("fieldPath")
    if not isinstance(field_path, str) or not field_path:
        field_path = intent.field
    new_value = data.get("newValue")

    old_value = get_value_at_path(full_section, field_path)
    if old_value is MISSING:
        logger.warning(
            "Edit path %r not found in section %s; using model-reported old value",
            field_path, intent.section.value,
        )
        old_value = data.get("oldValue")
    elif old_value is not None and new_value is not None and type(old_value) is not type(new_value):
        logger.warning(
            "Proposed value for %s changes type from %s to %s",
            field_path, type(old_value).__name__, type(new_value).__name__,
        )

    result = EditResult(
        section=intent.section,
        field_path=field_path,
        old_value=old_value,
        new_value=new_value,
        explanation=str(data.get("explanation") or ""),
        diff_preview=generate_diff_preview(old_value, new_value),
    )
    return EditResponse(result=result, usage=response.usage, cost=response.cost)
