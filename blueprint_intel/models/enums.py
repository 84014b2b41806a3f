"""Enumeration types for blueprint intelligence data models."""

from enum import Enum
from types import MappingProxyType


class BlueprintSection(str, Enum):
    INDUSTRY_MARKET_OVERVIEW = "industryMarketOverview"
    ICP_ANALYSIS_VALIDATION = "icpAnalysisValidation"
    OFFER_ANALYSIS_VIABILITY = "offerAnalysisViability"
    COMPETITOR_ANALYSIS = "competitorAnalysis"
    CROSS_ANALYSIS_SYNTHESIS = "crossAnalysisSynthesis"


class ContentType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    ARRAY = "array"
    OBJECT = "object"
    ENUM = "enum"


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class IntentType(str, Enum):
    QUESTION = "question"
    EDIT = "edit"
    EXPLAIN = "explain"
    REGENERATE = "regenerate"
    GENERAL = "general"


# Document order; chunking and prompts follow it
SECTION_ORDER: tuple[BlueprintSection, ...] = tuple(BlueprintSection)

VALID_SECTIONS: frozenset[str] = frozenset(s.value for s in BlueprintSection)

# Where single-section intents land when the model names an unknown section
DEFAULT_SECTION = BlueprintSection.CROSS_ANALYSIS_SYNTHESIS

SECTION_TITLES = MappingProxyType({
    BlueprintSection.INDUSTRY_MARKET_OVERVIEW: "Industry & Market Overview",
    BlueprintSection.ICP_ANALYSIS_VALIDATION: "ICP Analysis & Validation",
    BlueprintSection.OFFER_ANALYSIS_VIABILITY: "Offer Analysis & Viability",
    BlueprintSection.COMPETITOR_ANALYSIS: "Competitor Analysis",
    BlueprintSection.CROSS_ANALYSIS_SYNTHESIS: "Cross-Analysis Synthesis",
})


def parse_section(value) -> BlueprintSection | None:
    """Return the matching section for a raw value, or None if it is not one."""
    if isinstance(value, BlueprintSection):
        return value
    if isinstance(value, str) and value in VALID_SECTIONS:
        return BlueprintSection(value)
    return None
