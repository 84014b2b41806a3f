"""Shared fixtures: a complete Strategic Blueprint and chunk builders."""

import copy

import pytest

from blueprint_intel.models.chunk import BlueprintChunk, ChunkMetadata
from blueprint_intel.models.enums import BlueprintSection, ContentType

SAMPLE_BLUEPRINT = {
    "industryMarketOverview": {
        "categorySnapshot": {
            "category": "B2B SaaS project management",
            "marketMaturity": "growing",
            "awarenessLevel": "medium",
            "buyingBehavior": "committee_driven",
            "averageSalesCycle": "30-60 days",
            "seasonality": "Q1 budget resets",
        },
        "marketDynamics": {
            "demandDrivers": ["remote work", "tool consolidation"],
            "buyingTriggers": ["missed deadlines", "new funding round"],
            "barriersToPurchase": ["migration effort"],
        },
        "painPoints": {
            "primary": [
                "Teams lose track of deadlines across tools",
                "Managers lack visibility into workload",
            ],
            "secondary": ["Onboarding new hires to processes is slow"],
        },
        "psychologicalDrivers": {
            "drivers": [
                {"driver": "Control", "description": "Leaders want to feel on top of delivery"},
                {"driver": "Status", "description": "Teams want to look organised to clients"},
            ],
        },
        "audienceObjections": {
            "objections": [
                {"objection": "We already use spreadsheets", "howToAddress": "Show time saved per week"},
                {"objection": "Too expensive", "howToAddress": "Anchor against missed deadline costs"},
            ],
        },
        "messagingOpportunities": {
            "opportunities": ["Deadline certainty", "One source of truth"],
            "summaryRecommendations": ["Lead with visibility", "Use customer proof"],
        },
    },
    "icpAnalysisValidation": {
        "coherenceCheck": {
            "clearlyDefined": True,
            "reachableThroughPaidChannels": True,
            "adequateScale": True,
            "hasPainOfferSolves": True,
            "hasBudgetAndAuthority": False,
        },
        "painSolutionFit": {
            "primaryPain": "Missed deadlines",
            "offerComponentSolvingIt": "Automated timeline alerts",
            "fitAssessment": "strong",
            "notes": "Direct mapping between pain and feature",
        },
        "marketReachability": {
            "metaVolume": True,
            "linkedInVolume": True,
            "googleSearchDemand": "moderate",
            "contradictingSignals": [],
        },
        "economicFeasibility": {
            "hasBudget": True,
            "purchasesSimilar": True,
            "tamAlignedWithCac": True,
            "notes": "Mid-market budgets fit the price point",
        },
        "riskAssessment": {
            "reachability": "low",
            "budget": "medium",
            "painStrength": "low",
            "competitiveness": "high",
        },
        "finalVerdict": {
            "status": "validated",
            "reasoning": "Clear pain with reachable buyers",
            "recommendations": ["Target ops leaders", "Start on LinkedIn"],
        },
    },
    "offerAnalysisViability": {
        "offerClarity": {
            "clearlyArticulated": True,
            "solvesRealPain": True,
            "benefitsEasyToUnderstand": True,
            "transformationMeasurable": False,
            "valuePropositionObvious": True,
        },
        "offerStrength": {
            "painRelevance": 8,
            "urgency": 6,
            "differentiation": 5,
            "tangibility": 7,
            "proof": 4,
            "pricingLogic": 7,
            "overallScore": 6.2,
        },
        "marketOfferFit": {
            "marketWantsNow": True,
            "competitorsOfferSimilar": True,
            "priceMatchesExpectations": True,
            "proofStrongForColdTraffic": False,
            "transformationBelievable": True,
        },
        "redFlags": ["weak_proof", "crowded_market"],
        "recommendation": {
            "status": "proceed_with_adjustments",
            "reasoning": "Strong pain relevance but thin proof",
            "actionItems": ["Collect case studies", "Add a free trial"],
        },
    },
    "competitorAnalysis": {
        "competitors": [
            {
                "name": "Asana",
                "positioning": "Work management for teams",
                "offer": "Freemium with paid tiers",
                "price": "$10.99/user/month",
                "funnels": "Free trial to sales assist",
                "adPlatforms": ["Meta", "Google"],
                "strengths": ["Brand recognition"],
                "weaknesses": ["Complex for small teams"],
            },
            {
                "name": "Monday.com",
                "positioning": "Work OS",
                "offer": "Template-driven boards",
                "price": "$9/seat/month",
                "funnels": "Self-serve signup",
                "adPlatforms": ["YouTube"],
                "strengths": ["Visual UI"],
                "weaknesses": ["Seat minimums"],
            },
        ],
        "creativeLibrary": {
            "adHooks": ["Stop missing deadlines", "Your team, finally in sync"],
            "creativeFormats": {
                "ugc": True,
                "carousels": True,
                "statics": True,
                "testimonial": False,
                "productDemo": True,
            },
        },
        "funnelBreakdown": {
            "landingPagePatterns": ["Hero with product shot"],
            "headlineStructure": ["Outcome-first headline"],
            "ctaHierarchy": ["Start free trial", "Book demo"],
            "socialProofPatterns": ["Logo walls"],
            "leadCaptureMethods": ["Free trial signup"],
            "formFriction": "low",
        },
        "marketStrengths": ["Mature category", "High willingness to pay"],
        "marketWeaknesses": ["Feature parity", "Generic messaging"],
        "gapsAndOpportunities": {
            "messagingOpportunities": ["Speak to deadline anxiety"],
            "creativeOpportunities": ["Founder-led demos"],
            "funnelOpportunities": ["Interactive ROI calculator"],
        },
    },
    "crossAnalysisSynthesis": {
        "keyInsights": [
            {
                "insight": "Deadline anxiety is the sharpest pain",
                "source": "industryMarketOverview",
                "implication": "Lead messaging with deadline certainty",
                "priority": "high",
            },
            {
                "insight": "Competitors under-invest in proof",
                "source": "competitorAnalysis",
                "implication": "Case studies are a differentiator",
                "priority": "medium",
            },
        ],
        "recommendedPositioning": "The project tool that guarantees you never miss a deadline",
        "primaryMessagingAngles": ["Deadline certainty", "Visibility for managers"],
        "recommendedPlatforms": [
            {"platform": "LinkedIn", "reasoning": "Reaches ops leaders", "priority": "primary"},
            {"platform": "Meta", "reasoning": "Cheap retargeting", "priority": "secondary"},
        ],
        "criticalSuccessFactors": ["Strong onboarding", "Proof assets"],
        "potentialBlockers": ["Long procurement cycles"],
        "nextSteps": ["Build case studies", "Launch LinkedIn pilot"],
    },
}

# Chunks the sample produces per section
SAMPLE_CHUNK_COUNTS = {
    BlueprintSection.INDUSTRY_MARKET_OVERVIEW: 10,
    BlueprintSection.ICP_ANALYSIS_VALIDATION: 6,
    BlueprintSection.OFFER_ANALYSIS_VIABILITY: 11,
    BlueprintSection.COMPETITOR_ANALYSIS: 8,
    BlueprintSection.CROSS_ANALYSIS_SYNTHESIS: 9,
}


@pytest.fixture
def sample_blueprint():
    """A fresh deep copy, so tests may mutate it freely."""
    return copy.deepcopy(SAMPLE_BLUEPRINT)


def make_chunk(
    similarity: float | None = 0.8,
    section: BlueprintSection = BlueprintSection.CROSS_ANALYSIS_SYNTHESIS,
    field_path: str = "recommendedPositioning",
    content: str = "Recommended Positioning: Never miss a deadline",
) -> BlueprintChunk:
    return BlueprintChunk(
        id=f"chunk-{field_path}",
        blueprint_id="bp-1",
        section=section,
        field_path=field_path,
        content=content,
        content_type=ContentType.STRING,
        metadata=ChunkMetadata(
            section_title="Cross-Analysis Synthesis",
            field_description="Recommended market positioning",
            is_editable=True,
        ),
        similarity=similarity,
    )


@pytest.fixture
def chunk_factory():
    """Builder for similarity-annotated chunks."""
    return make_chunk
