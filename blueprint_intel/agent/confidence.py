"""Multi-factor confidence and source quality scoring over retrieved chunks.

Thresholds are calibrated for cosine similarity from the blueprint
``match_blueprint_chunks`` search:

- high:   avg similarity > 0.80 AND >= 3 chunks AND >= 2 chunks above 0.85
- medium: avg similarity > 0.65 OR >= 2 chunks
- low:    everything else, including no chunks

Confidence answers "can the answer be trusted"; source quality answers "how
good were the sources". Both share thresholds but are worded independently
and may disagree.
"""

from blueprint_intel.models.answer import ConfidenceFactors, ConfidenceResult, SourceQuality
from blueprint_intel.models.chunk import BlueprintChunk
from blueprint_intel.models.enums import SECTION_ORDER, Confidence

HIGH_QUALITY_THRESHOLD = 0.85
MEDIUM_QUALITY_THRESHOLD = 0.65
HIGH_CONFIDENCE_AVG_SIMILARITY = 0.80
HIGH_CONFIDENCE_MIN_CHUNKS = 3
HIGH_CONFIDENCE_MIN_HIGH_QUALITY = 2
MEDIUM_CONFIDENCE_MIN_CHUNKS = 2


def _similarities(chunks: list[BlueprintChunk]) -> list[float]:
    return [c.similarity or 0.0 for c in chunks]


def _percent(value: float) -> int:
    # Halves round up
    return int(value * 100 + 0.5)


def calculate_confidence(chunks: list[BlueprintChunk]) -> ConfidenceResult:
    """Classify how far an answer built from ``chunks`` can be trusted."""
    if not chunks:
        return ConfidenceResult(
            level=Confidence.LOW,
            factors=ConfidenceFactors(
                avg_similarity=0,
                chunk_count=0,
                coverage_score=0,
                high_quality_chunks=0,
            ),
            explanation="No relevant sources found in the blueprint.",
        )

    similarities = _similarities(chunks)
    chunk_count = len(chunks)
    avg_similarity = sum(similarities) / chunk_count
    high_quality_chunks = sum(1 for s in similarities if s > HIGH_QUALITY_THRESHOLD)

    # Rewards both section diversity and volume, capped at 1
    unique_sections = len({c.section for c in chunks})
    coverage_score = min(
        1.0, (unique_sections / len(SECTION_ORDER)) * (chunk_count / 3)
    )

    factors = ConfidenceFactors(
        avg_similarity=round(avg_similarity, 2),
        chunk_count=chunk_count,
        coverage_score=round(coverage_score, 2),
        high_quality_chunks=high_quality_chunks,
    )

    is_high = (
        avg_similarity > HIGH_CONFIDENCE_AVG_SIMILARITY
        and chunk_count >= HIGH_CONFIDENCE_MIN_CHUNKS
        and high_quality_chunks >= HIGH_CONFIDENCE_MIN_HIGH_QUALITY
    )
    is_medium = (
        avg_similarity > MEDIUM_QUALITY_THRESHOLD
        or chunk_count >= MEDIUM_CONFIDENCE_MIN_CHUNKS
    )
    avg_pct = _percent(avg_similarity)

    if is_high:
        level = Confidence.HIGH
        explanation = (
            f"High confidence: {high_quality_chunks} high-quality sources with "
            f"{avg_pct}% average relevance across {chunk_count} total sources."
        )
    elif is_medium:
        level = Confidence.MEDIUM
        if avg_similarity > MEDIUM_QUALITY_THRESHOLD:
            if chunk_count < HIGH_CONFIDENCE_MIN_CHUNKS:
                shortfall = "limited source count"
            elif high_quality_chunks < HIGH_CONFIDENCE_MIN_HIGH_QUALITY:
                shortfall = "few high-quality matches"
            else:
                shortfall = "moderate match quality"
            explanation = f"Medium confidence: {avg_pct}% average relevance, but {shortfall}."
        else:
            explanation = (
                f"Medium confidence: Found {chunk_count} relevant sources, "
                f"but average relevance is {avg_pct}%."
            )
    else:
        level = Confidence.LOW
        if chunk_count == 1:
            detail = "Only 1 source found"
        else:
            detail = f"{chunk_count} sources with {avg_pct}% average relevance"
        explanation = f"Low confidence: {detail}. Answer may be incomplete."

    return ConfidenceResult(level=level, factors=factors, explanation=explanation)


def build_source_quality(chunks: list[BlueprintChunk]) -> SourceQuality:
    """Summarise the quality of the retrieved sources themselves."""
    if not chunks:
        return SourceQuality(
            avg_relevance=0,
            source_count=0,
            high_quality_sources=0,
            explanation="No sources available.",
        )

    similarities = _similarities(chunks)
    source_count = len(chunks)
    avg_relevance = sum(similarities) / source_count
    high_quality_sources = sum(1 for s in similarities if s > HIGH_QUALITY_THRESHOLD)
    avg_pct = _percent(avg_relevance)

    if high_quality_sources >= 3:
        explanation = (
            f"Excellent: {high_quality_sources} highly relevant sources "
            f"with {avg_pct}% average match."
        )
    elif high_quality_sources >= 1:
        noun = "source" if high_quality_sources == 1 else "sources"
        explanation = (
            f"Good: {high_quality_sources} highly relevant {noun} among "
            f"{source_count} total with {avg_pct}% average relevance."
        )
    elif source_count >= 2 and avg_relevance > MEDIUM_QUALITY_THRESHOLD:
        explanation = (
            f"Adequate: {source_count} sources with {avg_pct}% average relevance. "
            "No exceptionally strong matches."
        )
    else:
        noun = "source" if source_count == 1 else "sources"
        explanation = (
            f"Limited: {source_count} {noun} found with {avg_pct}% average "
            "relevance. Results may be incomplete."
        )

    return SourceQuality(
        avg_relevance=round(avg_relevance, 2),
        source_count=source_count,
        high_quality_sources=high_quality_sources,
        explanation=explanation,
    )
