"""
Report synthesizer: turns the accumulated stage data of a venture into the
final report, pitch deck outline and pitches with one structured AI call.
"""

import json
from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError

from venturelab.core.ai_client import AIClient
from venturelab.models.report import Report
from venturelab.models.stage_content import StageContent
from venturelab.models.venture import Venture
from venturelab.schemas.report import ReportDraft


class ReportSynthesisError(Exception):
    """The report could not be produced; nothing should be persisted."""


_REPORT_SYSTEM_PROMPT = """\
You are an expert business analyst writing a complete startup venture report \
from the venture data you are given (the venture record plus, for every \
stage, the founder's content and the analysis produced at that stage).

Produce:
- fullReport: an object whose keys are section names and whose values are \
  text, lists of text or nested sections.  Cover at least the executive \
  summary, problem statement, solution, market analysis, business model, \
  competitive advantages and implementation plan.
- pitchDeck: an ordered list of slides, each with a title and content (text \
  or a list of bullet points).
- elevatorPitch: a 20-second pitch of roughly 50 words.
- fullPitch: a 3-minute pitch script of roughly 450 words.

Ground every statement in the data provided; do not invent traction.
"""


def build_report_payload(venture: Venture, stage_contents: Iterable[StageContent]) -> str:
    stages = {
        sc.stage: {"content": sc.content, "analysis": sc.ai_analysis}
        for sc in stage_contents
    }
    venture_data = {
        "id": str(venture.id),
        "title": venture.title,
        "currentStage": venture.current_stage,
        "isCompleted": venture.is_completed,
    }
    return json.dumps({"venture": venture_data, "stages": stages}, default=str)


async def synthesize(ai: AIClient, venture: Venture, stage_contents: Iterable[StageContent]) -> ReportDraft:
    """Produce a ``ReportDraft`` for *venture*; raises ``ReportSynthesisError`` on any failure."""
    payload = build_report_payload(venture, stage_contents)
    try:
        draft = await ai.extract(_REPORT_SYSTEM_PROMPT, payload, ReportDraft)
        return ReportDraft.model_validate(draft)
    except ValidationError as exc:
        raise ReportSynthesisError("Report output did not match the expected shape") from exc
    except Exception as exc:
        raise ReportSynthesisError(str(exc)) from exc


# ===================================================================
# Markdown export
# ===================================================================

def _humanize(key: str) -> str:
    """``executiveSummary`` / ``executive_summary`` -> ``Executive Summary``."""
    words: list[str] = []
    current = ""
    for ch in key.replace("_", " ").replace("-", " "):
        if ch == " ":
            if current:
                words.append(current)
            current = ""
        elif ch.isupper() and current and not current[-1].isupper():
            words.append(current)
            current = ch
        else:
            current += ch
    if current:
        words.append(current)
    return " ".join(w[:1].upper() + w[1:] for w in words)


def _render_value(value: Any, level: int, lines: list[str]) -> None:
    if isinstance(value, dict):
        for key, inner in value.items():
            lines.append(f"{'#' * min(level, 6)} {_humanize(str(key))}")
            lines.append("")
            _render_value(inner, level + 1, lines)
    elif isinstance(value, list):
        for item in value:
            if isinstance(item, (dict, list)):
                _render_value(item, level, lines)
            else:
                lines.append(f"- {item}")
        lines.append("")
    elif value is not None and str(value).strip():
        lines.append(str(value).strip())
        lines.append("")


def render_markdown(report: Report) -> str:
    """Render a stored report (sections, deck, pitches) as one Markdown document."""
    lines: list[str] = [f"# {report.title}", ""]

    if report.elevator_pitch:
        lines += ["## Elevator Pitch", "", report.elevator_pitch.strip(), ""]

    _render_value(report.full_report or {}, 2, lines)

    if report.pitch_deck:
        lines += ["## Pitch Deck", ""]
        for index, slide in enumerate(report.pitch_deck, start=1):
            lines.append(f"### Slide {index}: {slide.get('title', '')}".rstrip())
            lines.append("")
            _render_value(slide.get("content"), 4, lines)

    if report.full_pitch:
        lines += ["## Full Pitch", "", report.full_pitch.strip(), ""]

    return "\n".join(lines).rstrip() + "\n"
