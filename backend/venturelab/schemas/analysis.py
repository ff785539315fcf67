"""
Pydantic models for the structured analysis produced at each stage.

Every stage that has an analysis routine owns one model below; the model is
handed to the AI collaborator as the required output shape and is also used
to validate analysis payloads submitted by clients.  Every field is optional
so partially filled analyses survive, scores are clamped to 0..100, and keys
the models do not know about are preserved.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import AfterValidator, BeforeValidator, ConfigDict

from venturelab.core.stages import Stage
from venturelab.schemas.base import CamelModel


def _round_score(value: Any) -> Any:
    if isinstance(value, float):
        return round(value)
    return value


def _clamp_score(value: int) -> int:
    return max(0, min(100, value))


Score = Annotated[int, BeforeValidator(_round_score), AfterValidator(_clamp_score)]
Level = Literal["high", "medium", "low"]


class AnalysisModel(CamelModel):
    model_config = ConfigDict(extra="allow")


# ---------------------------------------------------------------------------
# initialIdea
# ---------------------------------------------------------------------------

class IdeaEntities(AnalysisModel):
    problems: list[str] | None = None
    solutions: list[str] | None = None
    customers: list[str] | None = None
    market: list[str] | None = None


class InitialIdeaAnalysis(AnalysisModel):
    keywords: list[str] | None = None
    problem_solution_fit: Score | None = None
    suggested_aspects: list[str] | None = None
    entities: IdeaEntities | None = None


# ---------------------------------------------------------------------------
# smartRefinement
# ---------------------------------------------------------------------------

class CriterionAssessment(AnalysisModel):
    score: Score | None = None
    feedback: str | None = None


class SmartAnalysis(AnalysisModel):
    specific: CriterionAssessment | None = None
    measurable: CriterionAssessment | None = None
    achievable: CriterionAssessment | None = None
    relevant: CriterionAssessment | None = None
    time_bound: CriterionAssessment | None = None
    overall_score: Score | None = None
    next_steps: list[str] | None = None


# ---------------------------------------------------------------------------
# opportunityAnalysis
# ---------------------------------------------------------------------------

class MarketSize(AnalysisModel):
    tam: str | None = None
    sam: str | None = None
    som: str | None = None
    description: str | None = None


class GrowthPotential(AnalysisModel):
    rate: str | None = None
    factors: list[str] | None = None


class CompetitiveLandscape(AnalysisModel):
    direct_competitors: list[str] | None = None
    indirect_competitors: list[str] | None = None
    advantages: list[str] | None = None
    threats: list[str] | None = None


class MarketAnalysis(AnalysisModel):
    market_size: MarketSize | None = None
    growth_potential: GrowthPotential | None = None
    competitive_landscape: CompetitiveLandscape | None = None
    opportunity_score: Score | None = None
    market_insights: list[str] | None = None


# ---------------------------------------------------------------------------
# ventureThesis
# ---------------------------------------------------------------------------

class ThesisSolution(AnalysisModel):
    description: str | None = None
    key_features: list[str] | None = None
    unique_value: str | None = None


class CustomerPersona(AnalysisModel):
    name: str | None = None
    description: str | None = None
    pain_points: list[str] | None = None


class TargetCustomers(AnalysisModel):
    segments: list[str] | None = None
    personas: list[CustomerPersona] | None = None


class BusinessModel(AnalysisModel):
    revenue_streams: list[str] | None = None
    pricing_strategy: str | None = None
    customer_acquisition: str | None = None
    key_partners: list[str] | None = None


class TeamAndResources(AnalysisModel):
    required_roles: list[str] | None = None
    key_skills: list[str] | None = None
    resources: list[str] | None = None


class Roadmap(AnalysisModel):
    short_term: list[str] | None = None
    medium_term: list[str] | None = None
    long_term: list[str] | None = None


class VentureThesisAnalysis(AnalysisModel):
    vision: str | None = None
    mission: str | None = None
    problem_statement: str | None = None
    solution: ThesisSolution | None = None
    target_customers: TargetCustomers | None = None
    business_model: BusinessModel | None = None
    competitive_advantages: list[str] | None = None
    team_and_resources: TeamAndResources | None = None
    roadmap: Roadmap | None = None
    overall_score: Score | None = None


# ---------------------------------------------------------------------------
# viabilityAssessment
# ---------------------------------------------------------------------------

class MarketAssessment(AnalysisModel):
    demand_level: Level | None = None
    demand_reasons: list[str] | None = None
    barrier_to_entry: str | None = None
    competitive_pressure: Level | None = None


class FinancialProjection(AnalysisModel):
    year: int | None = None
    revenue: float | None = None
    expenses: float | None = None
    profit: float | None = None


class BreakEvenPoint(AnalysisModel):
    time: str | None = None
    units: int | None = None
    revenue: float | None = None


class FinancialProjections(AnalysisModel):
    projections: list[FinancialProjection] | None = None
    break_even_point: BreakEvenPoint | None = None
    key_assumptions: list[str] | None = None
    capital_required: str | None = None


class KeyRisk(AnalysisModel):
    risk: str | None = None
    impact: Level | None = None
    mitigation: str | None = None


class RiskAssessment(AnalysisModel):
    key_risks: list[KeyRisk] | None = None
    success_probability: Score | None = None


class ViabilityAnalysis(AnalysisModel):
    market_assessment: MarketAssessment | None = None
    financial_projections: FinancialProjections | None = None
    risk_assessment: RiskAssessment | None = None
    viability_score: Score | None = None
    recommended_actions: list[str] | None = None


# ---------------------------------------------------------------------------
# gtmStrategy
# ---------------------------------------------------------------------------

class SegmentPriority(AnalysisModel):
    segment: str | None = None
    priority: int | None = None
    reasoning: str | None = None


class TargetMarketStrategy(AnalysisModel):
    primary_segments: list[str] | None = None
    segment_prioritization: list[SegmentPriority] | None = None
    early_adopters: str | None = None


class ChannelData(AnalysisModel):
    name: str | None = None
    effectiveness: Score | None = None
    cost_efficiency: Score | None = None
    time_to_results: Score | None = None


class MarketingStrategy(AnalysisModel):
    value_proposition: str | None = None
    key_messages: list[str] | None = None
    channels: list[ChannelData] | None = None
    content_strategy: list[str] | None = None


class SalesStrategy(AnalysisModel):
    sales_process: list[str] | None = None
    conversion_tactics: list[str] | None = None
    partnership_opportunities: list[str] | None = None


class PricingTier(AnalysisModel):
    name: str | None = None
    price: str | None = None
    benefits: list[str] | None = None
    target: str | None = None


class PricingStrategy(AnalysisModel):
    strategy: str | None = None
    pricing_tiers: list[PricingTier] | None = None
    competitive_pricing: str | None = None


class GrowthProjection(AnalysisModel):
    month: int | None = None
    customers: int | None = None


class CustomerAcquisition(AnalysisModel):
    cac: str | None = None
    ltv: str | None = None
    growth_projections: list[GrowthProjection] | None = None


class LaunchPhase(AnalysisModel):
    name: str | None = None
    timeline: str | None = None
    activities: list[str] | None = None
    goals: list[str] | None = None


class LaunchPlan(AnalysisModel):
    phases: list[LaunchPhase] | None = None
    key_metrics: list[str] | None = None


class GTMAnalysis(AnalysisModel):
    target_market_strategy: TargetMarketStrategy | None = None
    marketing_strategy: MarketingStrategy | None = None
    sales_strategy: SalesStrategy | None = None
    pricing_strategy: PricingStrategy | None = None
    customer_acquisition: CustomerAcquisition | None = None
    launch_plan: LaunchPlan | None = None
    overall_score: Score | None = None


# ---------------------------------------------------------------------------
# Stage lookup
# ---------------------------------------------------------------------------

STAGE_ANALYSIS_MODELS: dict[Stage, type[AnalysisModel]] = {
    Stage.INITIAL_IDEA: InitialIdeaAnalysis,
    Stage.SMART_REFINEMENT: SmartAnalysis,
    Stage.OPPORTUNITY_ANALYSIS: MarketAnalysis,
    Stage.VENTURE_THESIS: VentureThesisAnalysis,
    Stage.VIABILITY_ASSESSMENT: ViabilityAnalysis,
    Stage.GTM_STRATEGY: GTMAnalysis,
}


def dump_analysis(analysis: AnalysisModel) -> dict[str, Any]:
    """Serialize an analysis the way it is persisted and returned: camelCase, no nulls."""
    return analysis.model_dump(by_alias=True, exclude_none=True)


def normalize_stage_analysis(stage: Stage, data: dict[str, Any] | None) -> dict[str, Any] | None:
    """Validate a raw analysis payload against the model of *stage*.

    Stages without a model (the report stage) keep the payload untouched.
    Raises ``pydantic.ValidationError`` when the payload does not fit.
    """
    if data is None:
        return None
    model = STAGE_ANALYSIS_MODELS.get(stage)
    if model is None:
        return dict(data)
    return dump_analysis(model.model_validate(data))
