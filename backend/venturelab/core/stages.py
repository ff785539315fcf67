"""Stage catalogue for the venture journey.

The order of the stages is load-bearing: it drives navigation (which stage a
venture may open), the ``current_stage`` pointer stored on each venture, and
the set of stages that must be complete before a report can be generated.
"""

from __future__ import annotations

from enum import Enum


class Stage(str, Enum):
    """Enumerate the venture development stages in canonical order."""

    INITIAL_IDEA = "initialIdea"
    SMART_REFINEMENT = "smartRefinement"
    OPPORTUNITY_ANALYSIS = "opportunityAnalysis"
    VENTURE_THESIS = "ventureThesis"
    VIABILITY_ASSESSMENT = "viabilityAssessment"
    GTM_STRATEGY = "gtmStrategy"
    PITCH_REPORT = "pitchReport"

    @property
    def order(self) -> int:
        """Return the 1-based rank of the stage."""
        return STAGE_ORDER[self]

    @property
    def label(self) -> str:
        return STAGE_LABELS[self]

    @classmethod
    def from_order(cls, rank: int) -> "Stage":
        """Return the stage holding *rank*; raises ``ValueError`` for unknown ranks."""
        for stage, stage_rank in STAGE_ORDER.items():
            if stage_rank == rank:
                return stage
        raise ValueError(f"Invalid stage rank {rank}; expected 1..{len(STAGE_ORDER)}")


STAGE_ORDER: dict[Stage, int] = {
    Stage.INITIAL_IDEA: 1,
    Stage.SMART_REFINEMENT: 2,
    Stage.OPPORTUNITY_ANALYSIS: 3,
    Stage.VENTURE_THESIS: 4,
    Stage.VIABILITY_ASSESSMENT: 5,
    Stage.GTM_STRATEGY: 6,
    Stage.PITCH_REPORT: 7,
}

STAGE_LABELS: dict[Stage, str] = {
    Stage.INITIAL_IDEA: "Initial Idea",
    Stage.SMART_REFINEMENT: "SMART Refinement",
    Stage.OPPORTUNITY_ANALYSIS: "Opportunity Analysis",
    Stage.VENTURE_THESIS: "Venture Thesis",
    Stage.VIABILITY_ASSESSMENT: "Viability Assessment",
    Stage.GTM_STRATEGY: "GTM Strategy",
    Stage.PITCH_REPORT: "Pitch & Report",
}

FIRST_STAGE_RANK = 1
LAST_STAGE_RANK = len(STAGE_ORDER)

# Every stage except the terminal report stage gates report generation.
REQUIRED_REPORT_STAGES: tuple[Stage, ...] = tuple(
    stage for stage in sorted(Stage, key=lambda s: s.order) if stage is not Stage.PITCH_REPORT
)


def ordered_stages() -> list[Stage]:
    return sorted(Stage, key=lambda stage: stage.order)


def is_valid_rank(rank: int) -> bool:
    return FIRST_STAGE_RANK <= rank <= LAST_STAGE_RANK


def reachable_stages(current_stage: int) -> list[Stage]:
    """Stages a venture may open directly: every stage ranked at or below *current_stage*."""
    return [stage for stage in ordered_stages() if stage.order <= current_stage]


def missing_required_stages(completed: set[Stage] | set[str]) -> list[Stage]:
    """Return the required report stages absent from *completed*, in canonical order."""
    completed_values = {Stage(value) for value in completed}
    return [stage for stage in REQUIRED_REPORT_STAGES if stage not in completed_values]
