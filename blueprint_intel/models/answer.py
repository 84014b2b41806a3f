"""Agent result data models."""

from dataclasses import dataclass, field
from typing import Any

from blueprint_intel.llm.usage import Usage
from blueprint_intel.models.chunk import BlueprintChunk
from blueprint_intel.models.enums import BlueprintSection, Confidence


@dataclass
class ConfidenceFactors:
    """Retrieval signals behind a confidence level (rounded to 2 decimals)."""

    avg_similarity: float
    chunk_count: int
    coverage_score: float
    high_quality_chunks: int


@dataclass
class ConfidenceResult:
    """How far an answer can be trusted, with a user-facing justification."""

    level: Confidence
    factors: ConfidenceFactors
    explanation: str

    def __post_init__(self):
        if not isinstance(self.level, Confidence):
            self.level = Confidence(self.level)


@dataclass
class SourceQuality:
    """How good the retrieved sources are, independent of the answer."""

    avg_relevance: float
    source_count: int
    high_quality_sources: int
    explanation: str


@dataclass
class QAResponse:
    """An answer grounded in retrieved blueprint chunks."""

    answer: str
    sources: list[BlueprintChunk]
    confidence: Confidence
    confidence_result: ConfidenceResult
    source_quality: SourceQuality
    usage: Usage = field(default_factory=Usage)
    cost: float = 0.0


@dataclass(frozen=True)
class EditResult:
    """A proposed field-level change awaiting user confirmation.

    ``requires_confirmation`` is not an init argument: every proposal must be
    confirmed before it is applied.
    """

    section: BlueprintSection
    field_path: str
    old_value: Any
    new_value: Any
    explanation: str
    diff_preview: str
    requires_confirmation: bool = field(default=True, init=False)

    def to_dict(self) -> dict:
        return {
            "section": self.section.value,
            "fieldPath": self.field_path,
            "oldValue": self.old_value,
            "newValue": self.new_value,
            "explanation": self.explanation,
            "diffPreview": self.diff_preview,
            "requiresConfirmation": self.requires_confirmation,
        }


@dataclass
class EditResponse:
    result: EditResult
    usage: Usage = field(default_factory=Usage)
    cost: float = 0.0


@dataclass
class RelatedFactor:
    """A data point from another section that supports an explanation."""

    section: BlueprintSection
    factor: str
    relevance: str


@dataclass
class ExplainResponse:
    explanation: str
    related_factors: list[RelatedFactor] = field(default_factory=list)
    confidence: Confidence = Confidence.MEDIUM
    usage: Usage = field(default_factory=Usage)
    cost: float = 0.0
