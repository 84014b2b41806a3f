"""Shape of a strategic blueprint document as produced by the generator.

These TypedDicts describe the JSON the chunker and agents read. Every key is
optional (``total=False``): generated documents are not guaranteed to be
complete, and consumers must tolerate missing fields.
"""

from typing import TypedDict


class CategorySnapshot(TypedDict, total=False):
    category: str
    marketMaturity: str  # "early" | "growing" | "saturated"
    awarenessLevel: str  # "low" | "medium" | "high"
    buyingBehavior: str
    averageSalesCycle: str
    seasonality: str


class MarketDynamics(TypedDict, total=False):
    demandDrivers: list[str]
    buyingTriggers: list[str]
    barriersToPurchase: list[str]
    macroRisks: dict


class PainPoints(TypedDict, total=False):
    primary: list[str]
    secondary: list[str]


class PsychologicalDriver(TypedDict, total=False):
    driver: str
    description: str


class AudienceObjection(TypedDict, total=False):
    objection: str
    howToAddress: str


class IndustryMarketOverview(TypedDict, total=False):
    categorySnapshot: CategorySnapshot
    marketDynamics: MarketDynamics
    painPoints: PainPoints
    psychologicalDrivers: dict  # {"drivers": list[PsychologicalDriver]}
    audienceObjections: dict  # {"objections": list[AudienceObjection]}
    messagingOpportunities: dict  # {"opportunities": [...], "summaryRecommendations": [...]}


class ICPAnalysisValidation(TypedDict, total=False):
    coherenceCheck: dict
    painSolutionFit: dict
    marketReachability: dict
    economicFeasibility: dict
    riskAssessment: dict
    finalVerdict: dict  # {"status", "reasoning", "recommendations"}


class OfferStrength(TypedDict, total=False):
    painRelevance: float
    urgency: float
    differentiation: float
    tangibility: float
    proof: float
    pricingLogic: float
    overallScore: float


class OfferAnalysisViability(TypedDict, total=False):
    offerClarity: dict
    offerStrength: OfferStrength
    marketOfferFit: dict
    redFlags: list[str]
    recommendation: dict  # {"status", "reasoning", "actionItems"}


class CompetitorSnapshot(TypedDict, total=False):
    name: str
    website: str
    positioning: str
    offer: str
    price: str
    funnels: str
    adPlatforms: list[str]
    strengths: list[str]
    weaknesses: list[str]


class CompetitorAnalysis(TypedDict, total=False):
    competitors: list[CompetitorSnapshot]
    creativeLibrary: dict  # {"adHooks": [...], "creativeFormats": {...}}
    funnelBreakdown: dict
    marketStrengths: list[str]
    marketWeaknesses: list[str]
    gapsAndOpportunities: dict


class KeyInsight(TypedDict, total=False):
    insight: str
    source: str
    implication: str
    priority: str  # "high" | "medium" | "low"


class PlatformRecommendation(TypedDict, total=False):
    platform: str
    reasoning: str
    priority: str  # "primary" | "secondary" | "testing"


class CrossAnalysisSynthesis(TypedDict, total=False):
    keyInsights: list[KeyInsight]
    recommendedPositioning: str
    primaryMessagingAngles: list[str]
    recommendedPlatforms: list[PlatformRecommendation]
    criticalSuccessFactors: list[str]
    potentialBlockers: list[str]
    nextSteps: list[str]


class StrategicBlueprint(TypedDict, total=False):
    industryMarketOverview: IndustryMarketOverview
    icpAnalysisValidation: ICPAnalysisValidation
    offerAnalysisViability: OfferAnalysisViability
    competitorAnalysis: CompetitorAnalysis
    crossAnalysisSynthesis: CrossAnalysisSynthesis
    metadata: dict
