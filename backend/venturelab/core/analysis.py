"""
Per-stage analysis engine.

Each analysed stage owns a ``StageRoutine``: a system prompt for the
structured extraction, a persona prompt for the conversational reply and the
Pydantic model the extraction must satisfy.  ``analyze`` runs both calls
concurrently and returns the pair, or raises ``AnalysisError``.  Stages
without a routine get a fixed acknowledgment and no AI call.
"""

import asyncio
import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from pydantic import ValidationError

from venturelab.core.ai_client import AIClient
from venturelab.core.stages import Stage
from venturelab.schemas.analysis import (
    AnalysisModel,
    GTMAnalysis,
    InitialIdeaAnalysis,
    MarketAnalysis,
    SmartAnalysis,
    VentureThesisAnalysis,
    ViabilityAnalysis,
    dump_analysis,
)

ACKNOWLEDGEMENT_REPLY = (
    "Thank you for your input. I'm analyzing this information and will provide feedback shortly."
)


class AnalysisError(Exception):
    """Either AI call of a stage routine failed; no partial result exists."""


class Message(Protocol):
    role: str
    content: str


@dataclass(frozen=True)
class AnalysisResult:
    reply: str
    analysis: dict[str, Any] | None = None


@dataclass(frozen=True)
class StageRoutine:
    analysis_prompt: str
    chat_prompt: str
    output_type: type[AnalysisModel]
    # initialIdea reads the founder's own words only
    user_messages_only: bool = False


# ---------------------------------------------------------------------------
# 1.  Initial idea
# ---------------------------------------------------------------------------

_INITIAL_IDEA_ANALYSIS_PROMPT = """\
You are an expert startup advisor analysing an early venture idea.  Extract \
the key information from the founder's description.

Fill every field:
- keywords: the most important keywords of the idea
- problemSolutionFit: 0-100, how well the proposed solution addresses the problem
- suggestedAspects: aspects the founder has not yet considered
- entities: the problems, solutions, customers and market segments mentioned
"""

_INITIAL_IDEA_CHAT_PROMPT = """\
You are a friendly venture coach helping a founder shape a new startup idea.  \
Reflect back the key elements you see in their idea (problem, solution, \
benefits), then ask at most three follow-up questions that would sharpen it.  \
Be conversational and encouraging.
"""

# ---------------------------------------------------------------------------
# 2.  SMART refinement
# ---------------------------------------------------------------------------

_SMART_ANALYSIS_PROMPT = """\
You evaluate business ideas against the SMART framework.  Assess the idea as \
described in the conversation.

Fill every field:
- specific, measurable, achievable, relevant, timeBound: each a score (0-100) \
  with short feedback
- overallScore: 0-100, overall SMART alignment
- nextSteps: concrete actions that would improve the weakest criteria
"""

_SMART_CHAT_PROMPT = """\
You are a venture coach refining a startup idea with the SMART framework \
(Specific, Measurable, Achievable, Relevant, Time-bound).  Point out what is \
already strong, name the weak criteria and suggest specific improvements.  \
Keep the tone educational and conversational.
"""

# ---------------------------------------------------------------------------
# 3.  Opportunity analysis
# ---------------------------------------------------------------------------

_MARKET_ANALYSIS_PROMPT = """\
You are a market analyst assessing the opportunity behind a startup idea.

Fill every field:
- marketSize: TAM, SAM and SOM estimates with a short description
- growthPotential: an estimated growth rate and its main drivers
- competitiveLandscape: direct and indirect competitors, advantages, threats
- opportunityScore: 0-100, overall attractiveness of the market
- marketInsights: the most important observations about the market
"""

_MARKET_CHAT_PROMPT = """\
You are a venture coach with deep market-analysis experience.  Help the \
founder understand market size, growth, competition and overall viability.  \
Use data-driven language without jargon, and finish with two or three \
questions that would sharpen their understanding of the market.
"""

# ---------------------------------------------------------------------------
# 4.  Venture thesis
# ---------------------------------------------------------------------------

_THESIS_ANALYSIS_PROMPT = """\
You are a venture partner writing the investment thesis for a startup.

Fill every field:
- vision, mission and problemStatement
- solution: description, keyFeatures and uniqueValue
- targetCustomers: segments and a few personas with their painPoints
- businessModel: revenueStreams, pricingStrategy, customerAcquisition, keyPartners
- competitiveAdvantages
- teamAndResources: requiredRoles, keySkills, resources
- roadmap: shortTerm, mediumTerm and longTerm milestones
- overallScore: 0-100, strength of the thesis
"""

_THESIS_CHAT_PROMPT = """\
You are a venture coach helping a founder articulate a crisp venture thesis: \
vision, mission, target customers, business model and roadmap.  Summarise \
what is taking shape, flag gaps, and ask one or two pointed questions.
"""

# ---------------------------------------------------------------------------
# 5.  Viability assessment
# ---------------------------------------------------------------------------

_VIABILITY_ANALYSIS_PROMPT = """\
You are a startup analyst judging whether a venture is viable.

Fill every field:
- marketAssessment: demandLevel (high, medium or low), demandReasons, \
  barrierToEntry, competitivePressure (high, medium or low)
- financialProjections: yearly projections (year, revenue, expenses, profit), \
  breakEvenPoint, keyAssumptions, capitalRequired
- riskAssessment: keyRisks (risk, impact high/medium/low, mitigation) and \
  successProbability (0-100)
- viabilityScore: 0-100
- recommendedActions
"""

_VIABILITY_CHAT_PROMPT = """\
You are a pragmatic venture coach stress-testing a startup.  Discuss demand, \
unit economics, funding needs and the biggest risks with their mitigations.  \
Be candid but constructive.
"""

# ---------------------------------------------------------------------------
# 6.  Go-to-market strategy
# ---------------------------------------------------------------------------

_GTM_ANALYSIS_PROMPT = """\
You are a go-to-market strategist planning a startup's launch.

Fill every field:
- targetMarketStrategy: primarySegments, segmentPrioritization (segment, \
  priority, reasoning), earlyAdopters
- marketingStrategy: valueProposition, keyMessages, channels (name, \
  effectiveness, costEfficiency, timeToResults, each 0-100), contentStrategy
- salesStrategy: salesProcess, conversionTactics, partnershipOpportunities
- pricingStrategy: strategy, pricingTiers (name, price, benefits, target), \
  competitivePricing
- customerAcquisition: cac, ltv, growthProjections (month, customers)
- launchPlan: phases (name, timeline, activities, goals) and keyMetrics
- overallScore: 0-100, readiness of the go-to-market plan
"""

_GTM_CHAT_PROMPT = """\
You are a venture coach helping a founder plan their go-to-market: who to \
sell to first, through which channels, at what price and in which launch \
phases.  Give concrete suggestions and ask what constraints they face.
"""


STAGE_ROUTINES: dict[Stage, StageRoutine] = {
    Stage.INITIAL_IDEA: StageRoutine(
        _INITIAL_IDEA_ANALYSIS_PROMPT, _INITIAL_IDEA_CHAT_PROMPT, InitialIdeaAnalysis, user_messages_only=True
    ),
    Stage.SMART_REFINEMENT: StageRoutine(_SMART_ANALYSIS_PROMPT, _SMART_CHAT_PROMPT, SmartAnalysis),
    Stage.OPPORTUNITY_ANALYSIS: StageRoutine(_MARKET_ANALYSIS_PROMPT, _MARKET_CHAT_PROMPT, MarketAnalysis),
    Stage.VENTURE_THESIS: StageRoutine(_THESIS_ANALYSIS_PROMPT, _THESIS_CHAT_PROMPT, VentureThesisAnalysis),
    Stage.VIABILITY_ASSESSMENT: StageRoutine(
        _VIABILITY_ANALYSIS_PROMPT, _VIABILITY_CHAT_PROMPT, ViabilityAnalysis
    ),
    Stage.GTM_STRATEGY: StageRoutine(_GTM_ANALYSIS_PROMPT, _GTM_CHAT_PROMPT, GTMAnalysis),
}


# ===================================================================
# Prompt building
# ===================================================================

def format_conversation(prior_messages: Sequence[Message], message: str) -> str:
    """Render the conversation as ``role: content`` blocks ending with the new user message."""
    lines = [f"{m.role}: {m.content}" for m in prior_messages]
    lines.append(f"user: {message}")
    return "\n\n".join(lines)


def build_extraction_payload(
    routine: StageRoutine,
    message: str,
    prior_messages: Sequence[Message],
    context: Mapping[str, Any] | None = None,
) -> str:
    if routine.user_messages_only:
        texts = [m.content for m in prior_messages if m.role == "user"]
        texts.append(message)
        payload = "\n\n".join(texts)
    else:
        payload = format_conversation(prior_messages, message)

    if context:
        payload += (
            "\n\nFindings from earlier stages:\n"
            f"{json.dumps(dict(context), indent=2, default=str)}"
        )
    return payload


# ===================================================================
# Engine
# ===================================================================

async def analyze(
    ai: AIClient,
    stage: Stage,
    message: str,
    prior_messages: Sequence[Message],
    context: Mapping[str, Any] | None = None,
) -> AnalysisResult:
    """Run the routine of *stage* against the conversation so far.

    Parameters
    ----------
    prior_messages:
        The stored conversation for (venture, stage), excluding *message*.
    context:
        Optional ``{stage: analysis}`` findings of earlier stages, appended
        to the extraction payload.
    """
    stage = Stage(stage)
    routine = STAGE_ROUTINES.get(stage)
    if routine is None:
        return AnalysisResult(reply=ACKNOWLEDGEMENT_REPLY)

    payload = build_extraction_payload(routine, message, prior_messages, context)
    chat_prompt = format_conversation(prior_messages, message)

    extracted, reply = await asyncio.gather(
        ai.extract(routine.analysis_prompt, payload, routine.output_type),
        ai.chat(routine.chat_prompt, chat_prompt),
        return_exceptions=True,
    )
    for outcome in (extracted, reply):
        if isinstance(outcome, BaseException):
            raise AnalysisError(f"{stage.value} analysis failed: {outcome}") from outcome

    if not isinstance(reply, str) or not reply.strip():
        raise AnalysisError(f"{stage.value} analysis failed: empty reply")

    try:
        analysis = routine.output_type.model_validate(extracted)
    except ValidationError as exc:
        raise AnalysisError(f"{stage.value} analysis failed: invalid structured output") from exc

    return AnalysisResult(reply=reply, analysis=dump_analysis(analysis))
