"""Per-section blueprint chunker.

Each blueprint section has its own strategy because retrieval granularity has
to match how users ask about it:

- composite structures (a category snapshot, a funnel breakdown) become one
  chunk whose content is a synthesised sentence covering every sub-field;
- homogeneous lists of atomic facts (pain points, objections, insights,
  platform recommendations) become one chunk per element, addressed by an
  indexed field path such as ``painPoints.primary[0]``;
- per-entity structures (competitors) become one chunk per entity.

Content is always labelled natural language ("Primary Pain Point: ...") so a
chunk can answer a question on its own. Missing or malformed sub-fields
degrade to empty text instead of raising.
"""

import logging
from collections.abc import Callable
from types import MappingProxyType
from typing import Any

from blueprint_intel.models.blueprint import StrategicBlueprint
from blueprint_intel.models.chunk import ChunkInput, ChunkMetadata
from blueprint_intel.models.enums import (
    SECTION_ORDER,
    SECTION_TITLES,
    BlueprintSection,
    ContentType,
)

logger = logging.getLogger(__name__)

SectionChunker = Callable[[str, dict], list[ChunkInput]]

OFFER_SCORE_FIELDS = (
    ("painRelevance", "Pain Relevance", "How relevant the offer is to target pain"),
    ("urgency", "Urgency", "Urgency created by the offer"),
    ("differentiation", "Differentiation", "How differentiated from competitors"),
    ("tangibility", "Tangibility", "How tangible the deliverables are"),
    ("proof", "Proof", "Strength of social proof and evidence"),
    ("pricingLogic", "Pricing Logic", "How logical the pricing appears"),
)


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _text(value: Any) -> str:
    """Render a scalar or list of scalars as plain text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, list):
        return ", ".join(t for t in (_text(v) for v in value) if t)
    if isinstance(value, dict):
        return ""
    return str(value).strip()


def _join(values: Any, sep: str = "; ") -> str:
    return sep.join(t for t in (_text(v) for v in _as_list(values)) if t)


def _make_chunk(
    blueprint_id: str,
    section: BlueprintSection,
    field_path: str,
    content: str,
    content_type: ContentType,
    field_description: str,
    is_editable: bool,
    original_value: Any,
) -> ChunkInput:
    return ChunkInput(
        blueprint_id=blueprint_id,
        section=section,
        field_path=field_path,
        content=content,
        content_type=content_type,
        metadata=ChunkMetadata(
            section_title=SECTION_TITLES[section],
            field_description=field_description,
            is_editable=is_editable,
            original_value=original_value,
        ),
    )


def chunk_industry_market_overview(blueprint_id: str, data: dict) -> list[ChunkInput]:
    """Snapshot and dynamics as one chunk each; pains, drivers and objections per item."""
    section = BlueprintSection.INDUSTRY_MARKET_OVERVIEW
    chunks = []

    cs = _as_dict(data.get("categorySnapshot"))
    chunks.append(_make_chunk(
        blueprint_id, section, "categorySnapshot",
        f"Category Snapshot for {_text(cs.get('category'))}: "
        f"Market maturity is {_text(cs.get('marketMaturity'))}, "
        f"awareness level is {_text(cs.get('awarenessLevel'))}, "
        f"buying behavior is {_text(cs.get('buyingBehavior'))}. "
        f"Average sales cycle: {_text(cs.get('averageSalesCycle'))}. "
        f"Seasonality: {_text(cs.get('seasonality'))}.",
        ContentType.OBJECT,
        "Market category overview including maturity, awareness, and buying patterns",
        False,
        data.get("categorySnapshot"),
    ))

    pain_points = _as_dict(data.get("painPoints"))
    for tier, label, description in (
        ("primary", "Primary", "Critical pain point experienced by target audience"),
        ("secondary", "Secondary", "Additional pain point experienced by target audience"),
    ):
        for index, pain in enumerate(_as_list(pain_points.get(tier))):
            chunks.append(_make_chunk(
                blueprint_id, section, f"painPoints.{tier}[{index}]",
                f"{label} Pain Point: {_text(pain)}",
                ContentType.STRING,
                description,
                True,
                pain,
            ))

    drivers = _as_list(_as_dict(data.get("psychologicalDrivers")).get("drivers"))
    for index, driver in enumerate(drivers):
        d = _as_dict(driver)
        chunks.append(_make_chunk(
            blueprint_id, section, f"psychologicalDrivers.drivers[{index}]",
            f"Psychological Driver - {_text(d.get('driver'))}: {_text(d.get('description'))}",
            ContentType.OBJECT,
            "Emotional motivator that drives buying decisions",
            True,
            driver,
        ))

    md = _as_dict(data.get("marketDynamics"))
    chunks.append(_make_chunk(
        blueprint_id, section, "marketDynamics",
        f"Market Dynamics: Demand drivers include {_join(md.get('demandDrivers'), ', ')}. "
        f"Buying triggers: {_join(md.get('buyingTriggers'), ', ')}. "
        f"Barriers to purchase: {_join(md.get('barriersToPurchase'), ', ')}.",
        ContentType.OBJECT,
        "Market forces affecting buying behavior",
        False,
        data.get("marketDynamics"),
    ))

    mo = _as_dict(data.get("messagingOpportunities"))
    chunks.append(_make_chunk(
        blueprint_id, section, "messagingOpportunities",
        f"Messaging Opportunities: {_join(mo.get('opportunities'))}. "
        f"Key Recommendations: {_join(mo.get('summaryRecommendations'))}",
        ContentType.ARRAY,
        "Angles to leverage in advertising and funnels",
        True,
        data.get("messagingOpportunities"),
    ))

    objections = _as_list(_as_dict(data.get("audienceObjections")).get("objections"))
    for index, objection in enumerate(objections):
        o = _as_dict(objection)
        chunks.append(_make_chunk(
            blueprint_id, section, f"audienceObjections.objections[{index}]",
            f'Objection: "{_text(o.get("objection"))}". '
            f"How to address: {_text(o.get('howToAddress'))}",
            ContentType.OBJECT,
            "Common objection from prospects with response strategy",
            True,
            objection,
        ))

    return chunks


def chunk_icp_analysis(blueprint_id: str, data: dict) -> list[ChunkInput]:
    """Each validation block becomes a single composite chunk."""
    section = BlueprintSection.ICP_ANALYSIS_VALIDATION
    chunks = []

    cc = _as_dict(data.get("coherenceCheck"))
    chunks.append(_make_chunk(
        blueprint_id, section, "coherenceCheck",
        f"ICP Coherence Check: Clearly defined: {_text(cc.get('clearlyDefined'))}, "
        f"Reachable via paid channels: {_text(cc.get('reachableThroughPaidChannels'))}, "
        f"Adequate scale: {_text(cc.get('adequateScale'))}, "
        f"Has pain the offer solves: {_text(cc.get('hasPainOfferSolves'))}, "
        f"Has budget and authority: {_text(cc.get('hasBudgetAndAuthority'))}",
        ContentType.OBJECT,
        "Validation that ICP is coherent and targetable",
        False,
        data.get("coherenceCheck"),
    ))

    psf = _as_dict(data.get("painSolutionFit"))
    chunks.append(_make_chunk(
        blueprint_id, section, "painSolutionFit",
        f'Pain-Solution Fit: Primary pain being solved is "{_text(psf.get("primaryPain"))}". '
        f'Offer component solving it: "{_text(psf.get("offerComponentSolvingIt"))}". '
        f"Fit assessment: {_text(psf.get('fitAssessment'))}. "
        f"Notes: {_text(psf.get('notes'))}",
        ContentType.OBJECT,
        "Analysis of how well offer solves ICP pain",
        True,
        data.get("painSolutionFit"),
    ))

    mr = _as_dict(data.get("marketReachability"))
    signals = _join(mr.get("contradictingSignals"), ", ") or "None"
    chunks.append(_make_chunk(
        blueprint_id, section, "marketReachability",
        f"Market Reachability: Meta volume adequate: {_text(mr.get('metaVolume'))}, "
        f"LinkedIn volume adequate: {_text(mr.get('linkedInVolume'))}, "
        f"Google search demand: {_text(mr.get('googleSearchDemand'))}. "
        f"Contradicting signals: {signals}",
        ContentType.OBJECT,
        "Assessment of ability to reach ICP via paid channels",
        False,
        data.get("marketReachability"),
    ))

    ef = _as_dict(data.get("economicFeasibility"))
    chunks.append(_make_chunk(
        blueprint_id, section, "economicFeasibility",
        f"Economic Feasibility: Has budget: {_text(ef.get('hasBudget'))}, "
        f"Purchases similar: {_text(ef.get('purchasesSimilar'))}, "
        f"TAM aligned with CAC: {_text(ef.get('tamAlignedWithCac'))}. "
        f"Notes: {_text(ef.get('notes'))}",
        ContentType.OBJECT,
        "Financial viability of targeting this ICP",
        False,
        data.get("economicFeasibility"),
    ))

    ra = _as_dict(data.get("riskAssessment"))
    chunks.append(_make_chunk(
        blueprint_id, section, "riskAssessment",
        f"ICP Risk Assessment: Reachability risk: {_text(ra.get('reachability'))}, "
        f"Budget risk: {_text(ra.get('budget'))}, "
        f"Pain strength risk: {_text(ra.get('painStrength'))}, "
        f"Competitiveness risk: {_text(ra.get('competitiveness'))}",
        ContentType.OBJECT,
        "Risk levels across key dimensions",
        False,
        data.get("riskAssessment"),
    ))

    fv = _as_dict(data.get("finalVerdict"))
    chunks.append(_make_chunk(
        blueprint_id, section, "finalVerdict",
        f"ICP Final Verdict: Status is {_text(fv.get('status'))}. "
        f"Reasoning: {_text(fv.get('reasoning'))}. "
        f"Recommendations: {_join(fv.get('recommendations'))}",
        ContentType.OBJECT,
        "Overall ICP validation conclusion",
        True,
        data.get("finalVerdict"),
    ))

    return chunks


def chunk_offer_analysis(blueprint_id: str, data: dict) -> list[ChunkInput]:
    """Each strength score individually; clarity, fit and recommendation as composites."""
    section = BlueprintSection.OFFER_ANALYSIS_VIABILITY
    chunks = []

    oc = _as_dict(data.get("offerClarity"))
    chunks.append(_make_chunk(
        blueprint_id, section, "offerClarity",
        f"Offer Clarity: Clearly articulated: {_text(oc.get('clearlyArticulated'))}, "
        f"Solves real pain: {_text(oc.get('solvesRealPain'))}, "
        f"Benefits easy to understand: {_text(oc.get('benefitsEasyToUnderstand'))}, "
        f"Transformation measurable: {_text(oc.get('transformationMeasurable'))}, "
        f"Value proposition obvious: {_text(oc.get('valuePropositionObvious'))}",
        ContentType.OBJECT,
        "Assessment of how clearly the offer is defined",
        False,
        data.get("offerClarity"),
    ))

    strength = _as_dict(data.get("offerStrength"))
    for key, label, description in OFFER_SCORE_FIELDS:
        chunks.append(_make_chunk(
            blueprint_id, section, f"offerStrength.{key}",
            f"Offer Strength - {label}: {_text(strength.get(key))}/10",
            ContentType.NUMBER,
            description,
            True,
            strength.get(key),
        ))

    # Derived from the sub-scores, so not directly editable
    chunks.append(_make_chunk(
        blueprint_id, section, "offerStrength.overallScore",
        f"Offer Strength Overall Score: {_text(strength.get('overallScore'))}/10",
        ContentType.NUMBER,
        "Aggregate offer strength score",
        False,
        strength.get("overallScore"),
    ))

    mof = _as_dict(data.get("marketOfferFit"))
    chunks.append(_make_chunk(
        blueprint_id, section, "marketOfferFit",
        f"Market-Offer Fit: Market wants now: {_text(mof.get('marketWantsNow'))}, "
        f"Competitors offer similar: {_text(mof.get('competitorsOfferSimilar'))}, "
        f"Price matches expectations: {_text(mof.get('priceMatchesExpectations'))}, "
        f"Proof strong for cold traffic: {_text(mof.get('proofStrongForColdTraffic'))}, "
        f"Transformation believable: {_text(mof.get('transformationBelievable'))}",
        ContentType.OBJECT,
        "How well the offer fits current market conditions",
        False,
        data.get("marketOfferFit"),
    ))

    red_flags = _as_list(data.get("redFlags"))
    if red_flags:
        chunks.append(_make_chunk(
            blueprint_id, section, "redFlags",
            f"Offer Red Flags: {_join(red_flags, ', ')}",
            ContentType.ARRAY,
            "Warning signs identified in the offer",
            True,
            red_flags,
        ))

    rec = _as_dict(data.get("recommendation"))
    chunks.append(_make_chunk(
        blueprint_id, section, "recommendation",
        f"Offer Recommendation: {_text(rec.get('status'))}. "
        f"Reasoning: {_text(rec.get('reasoning'))}. "
        f"Action items: {_join(rec.get('actionItems'))}",
        ContentType.OBJECT,
        "Final recommendation for the offer",
        True,
        data.get("recommendation"),
    ))

    return chunks


def chunk_competitor_analysis(blueprint_id: str, data: dict) -> list[ChunkInput]:
    """One chunk per competitor; library, funnel and gaps as composites."""
    section = BlueprintSection.COMPETITOR_ANALYSIS
    chunks = []

    for index, competitor in enumerate(_as_list(data.get("competitors"))):
        c = _as_dict(competitor)
        name = _text(c.get("name")) or f"competitor #{index + 1}"
        chunks.append(_make_chunk(
            blueprint_id, section, f"competitors[{index}]",
            f"Competitor: {name}. Positioning: {_text(c.get('positioning'))}. "
            f"Offer: {_text(c.get('offer'))}. Price: {_text(c.get('price'))}. "
            f"Funnels: {_text(c.get('funnels'))}. "
            f"Ad platforms: {_join(c.get('adPlatforms'), ', ')}. "
            f"Strengths: {_join(c.get('strengths'), ', ')}. "
            f"Weaknesses: {_join(c.get('weaknesses'), ', ')}.",
            ContentType.OBJECT,
            f"Competitive analysis of {name}",
            False,
            competitor,
        ))

    library = _as_dict(data.get("creativeLibrary"))
    ad_hooks = _as_list(library.get("adHooks"))
    if ad_hooks:
        chunks.append(_make_chunk(
            blueprint_id, section, "creativeLibrary.adHooks",
            f"Competitor Ad Hooks: {_join(ad_hooks)}",
            ContentType.ARRAY,
            "Hooks competitors use in their ads",
            False,
            ad_hooks,
        ))

    cf = _as_dict(library.get("creativeFormats"))
    chunks.append(_make_chunk(
        blueprint_id, section, "creativeLibrary.creativeFormats",
        f"Competitor Creative Formats: UGC: {_text(cf.get('ugc'))}, "
        f"Carousels: {_text(cf.get('carousels'))}, Statics: {_text(cf.get('statics'))}, "
        f"Testimonial: {_text(cf.get('testimonial'))}, "
        f"Product Demo: {_text(cf.get('productDemo'))}",
        ContentType.OBJECT,
        "Types of creative formats used by competitors",
        False,
        library.get("creativeFormats"),
    ))

    fb = _as_dict(data.get("funnelBreakdown"))
    chunks.append(_make_chunk(
        blueprint_id, section, "funnelBreakdown",
        f"Competitor Funnel Patterns: Headlines: {_join(fb.get('headlineStructure'))}. "
        f"CTAs: {_join(fb.get('ctaHierarchy'))}. "
        f"Social proof: {_join(fb.get('socialProofPatterns'))}. "
        f"Lead capture: {_join(fb.get('leadCaptureMethods'))}. "
        f"Form friction: {_text(fb.get('formFriction'))}.",
        ContentType.OBJECT,
        "Common funnel patterns among competitors",
        False,
        data.get("funnelBreakdown"),
    ))

    gaps = _as_dict(data.get("gapsAndOpportunities"))
    chunks.append(_make_chunk(
        blueprint_id, section, "gapsAndOpportunities",
        f"Competitive Gaps & Opportunities: "
        f"Messaging opportunities: {_join(gaps.get('messagingOpportunities'))}. "
        f"Creative opportunities: {_join(gaps.get('creativeOpportunities'))}. "
        f"Funnel opportunities: {_join(gaps.get('funnelOpportunities'))}.",
        ContentType.OBJECT,
        "Identified gaps and opportunities vs competitors",
        True,
        data.get("gapsAndOpportunities"),
    ))

    for key, label, description in (
        ("marketStrengths", "Market Strengths", "Overall strengths observed in the market"),
        ("marketWeaknesses", "Market Weaknesses", "Overall weaknesses observed in the market"),
    ):
        chunks.append(_make_chunk(
            blueprint_id, section, key,
            f"{label}: {_join(data.get(key))}",
            ContentType.ARRAY,
            description,
            False,
            data.get(key),
        ))

    return chunks


def chunk_cross_analysis(blueprint_id: str, data: dict) -> list[ChunkInput]:
    """Insights and platforms per item; positioning and step lists as single chunks."""
    section = BlueprintSection.CROSS_ANALYSIS_SYNTHESIS
    chunks = []

    for index, insight in enumerate(_as_list(data.get("keyInsights"))):
        i = _as_dict(insight)
        chunks.append(_make_chunk(
            blueprint_id, section, f"keyInsights[{index}]",
            f"Key Insight ({_text(i.get('priority'))} priority): {_text(i.get('insight'))}. "
            f"Source: {_text(i.get('source'))}. "
            f"Implication: {_text(i.get('implication'))}",
            ContentType.OBJECT,
            "Strategic insight from cross-analysis",
            True,
            insight,
        ))

    chunks.append(_make_chunk(
        blueprint_id, section, "recommendedPositioning",
        f"Recommended Positioning: {_text(data.get('recommendedPositioning'))}",
        ContentType.STRING,
        "Recommended market positioning",
        True,
        data.get("recommendedPositioning"),
    ))

    angles = _as_list(data.get("primaryMessagingAngles"))
    if angles:
        chunks.append(_make_chunk(
            blueprint_id, section, "primaryMessagingAngles",
            f"Primary Messaging Angles: {_join(angles)}",
            ContentType.ARRAY,
            "Messaging angles to lead with",
            True,
            angles,
        ))

    for index, platform in enumerate(_as_list(data.get("recommendedPlatforms"))):
        p = _as_dict(platform)
        name = _text(p.get("platform")) or f"platform #{index + 1}"
        chunks.append(_make_chunk(
            blueprint_id, section, f"recommendedPlatforms[{index}]",
            f"Recommended Platform: {name} ({_text(p.get('priority'))}). "
            f"Reasoning: {_text(p.get('reasoning'))}",
            ContentType.OBJECT,
            f"Platform recommendation: {name}",
            True,
            platform,
        ))

    chunks.append(_make_chunk(
        blueprint_id, section, "criticalSuccessFactors",
        f"Critical Success Factors: {_join(data.get('criticalSuccessFactors'))}",
        ContentType.ARRAY,
        "Key factors required for success",
        False,
        data.get("criticalSuccessFactors"),
    ))

    blockers = _as_list(data.get("potentialBlockers"))
    if blockers:
        chunks.append(_make_chunk(
            blueprint_id, section, "potentialBlockers",
            f"Potential Blockers: {_join(blockers)}",
            ContentType.ARRAY,
            "Obstacles that could impede success",
            False,
            blockers,
        ))

    chunks.append(_make_chunk(
        blueprint_id, section, "nextSteps",
        f"Recommended Next Steps: {_join(data.get('nextSteps'))}",
        ContentType.ARRAY,
        "Actionable next steps",
        True,
        data.get("nextSteps"),
    ))

    return chunks


SECTION_CHUNKERS: MappingProxyType = MappingProxyType({
    BlueprintSection.INDUSTRY_MARKET_OVERVIEW: chunk_industry_market_overview,
    BlueprintSection.ICP_ANALYSIS_VALIDATION: chunk_icp_analysis,
    BlueprintSection.OFFER_ANALYSIS_VIABILITY: chunk_offer_analysis,
    BlueprintSection.COMPETITOR_ANALYSIS: chunk_competitor_analysis,
    BlueprintSection.CROSS_ANALYSIS_SYNTHESIS: chunk_cross_analysis,
})


def chunk_section(
    blueprint_id: str,
    section: BlueprintSection,
    section_data: Any,
) -> list[ChunkInput]:
    """Chunk one section. Unusable section data yields no chunks, never an error."""
    if not isinstance(section_data, dict):
        logger.warning(
            "Blueprint %s: section %s is missing or not an object, skipping",
            blueprint_id, section.value,
        )
        return []

    chunker: SectionChunker = SECTION_CHUNKERS[section]
    try:
        return chunker(blueprint_id, section_data)
    except (TypeError, ValueError, AttributeError, KeyError):
        logger.exception(
            "Blueprint %s: failed to chunk section %s, skipping",
            blueprint_id, section.value,
        )
        return []


def chunk_blueprint(blueprint_id: str, blueprint: StrategicBlueprint) -> list[ChunkInput]:
    """Convert a blueprint into semantic chunks, in document section order.

    Pure function: no embedding or storage happens here. Re-chunking the same
    blueprint yields the same (section, field_path, content) triples.
    """
    if not isinstance(blueprint, dict):
        logger.warning("Blueprint %s is not an object; nothing to chunk", blueprint_id)
        return []

    chunks = []
    for section in SECTION_ORDER:
        chunks.extend(chunk_section(blueprint_id, section, blueprint.get(section.value)))
    return chunks
