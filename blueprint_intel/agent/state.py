"""Chat state definition for the LangGraph workflow."""

from typing import Any, TypedDict

from blueprint_intel.models.answer import EditResult, RelatedFactor
from blueprint_intel.models.chunk import BlueprintChunk
from blueprint_intel.models.intent import ChatIntent


class ChatState(TypedDict, total=False):
    """State object passed through one chat turn."""
    # Caller inputs
    message: str
    blueprint_id: str
    blueprint: dict[str, Any]
    chat_history: list[dict]

    # Routing
    intent: ChatIntent | None

    # Outputs
    response: str
    confidence: str | None  # "high" | "medium" | "low"
    confidence_explanation: str | None
    source_quality: str | None
    sources: list[BlueprintChunk]
    edit_result: EditResult | None
    related_factors: list[RelatedFactor]

    # Accounting, accumulated across every model and embedding call
    tokens_used: int
    cost: float
