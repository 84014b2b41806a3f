"""Question answering over retrieved blueprint chunks."""

import logging

from blueprint_intel.agent.confidence import build_source_quality, calculate_confidence
from blueprint_intel.llm.client import chat, trailing_history
from blueprint_intel.models.answer import QAResponse
from blueprint_intel.models.chunk import BlueprintChunk
from blueprint_intel.retrieval.retriever import build_context_from_chunks

logger = logging.getLogger(__name__)

QA_HISTORY_WINDOW = 6

QA_SYSTEM_PROMPT = """You are an expert assistant for Strategic Blueprint documents.
Your role is to answer questions about the blueprint accurately and helpfully.

RULES:
1. Answer using ONLY the provided context - do not make up information
2. If the answer isn't in the context, clearly say "I don't have that information in the blueprint"
3. Be specific and reference actual data from the blueprint
4. If multiple chunks are relevant, synthesize them into a coherent answer
5. Keep answers concise but complete
6. When referencing specific data, mention which section it comes from

CONTEXT SECTIONS:
- Industry Market Overview: Market landscape, pain points, psychological drivers
- ICP Analysis & Validation: ICP viability and validation
- Offer Analysis & Viability: Offer strength scores and recommendations
- Competitor Analysis: Competitor profiles and gaps
- Cross-Analysis Synthesis: Strategic recommendations and next steps"""


async def answer_question(
    query: str,
    chunks: list[BlueprintChunk],
    chat_history: list[dict] | None = None,
) -> QAResponse:
    """Answer ``query`` from ``chunks``; confidence is scored locally, not by the model."""
    context = build_context_from_chunks(chunks)

    messages = [
        {"role": "system", "content": QA_SYSTEM_PROMPT},
        *trailing_history(chat_history, QA_HISTORY_WINDOW),
        {
            "role": "user",
            "content": (
                f"## Blueprint Context:\n{context}\n\n"
                f"## Question:\n{query}\n\n"
                "Answer the question based on the blueprint data above."
            ),
        },
    ]
    response = await chat(messages, temperature=0.3, max_tokens=1024)

    confidence_result = calculate_confidence(chunks)
    source_quality = build_source_quality(chunks)
    logger.info(
        "Answered with %s confidence from %d chunks",
        confidence_result.level.value, len(chunks),
    )

    return QAResponse(
        answer=response.content,
        sources=chunks,
        confidence=confidence_result.level,
        confidence_result=confidence_result,
        source_quality=source_quality,
        usage=response.usage,
        cost=response.cost,
    )
