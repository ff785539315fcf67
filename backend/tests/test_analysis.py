from uuid import uuid4

import pytest
from pydantic import ValidationError

from venturelab.core.analysis import (
    ACKNOWLEDGEMENT_REPLY,
    STAGE_ROUTINES,
    AnalysisError,
    analyze,
)
from venturelab.core.stages import REQUIRED_REPORT_STAGES, Stage
from venturelab.models.chat_message import ChatMessage
from venturelab.schemas.analysis import InitialIdeaAnalysis, normalize_stage_analysis

VENTURE_ID = uuid4()


def _message(role: str, content: str, stage: Stage = Stage.INITIAL_IDEA) -> ChatMessage:
    return ChatMessage(venture_id=VENTURE_ID, stage=stage.value, role=role, content=content)


def _payload(fake_ai) -> str:
    return next(payload for kind, _, payload in fake_ai.calls if kind == "extract")


def test_every_required_stage_has_a_routine():
    assert set(STAGE_ROUTINES) == set(REQUIRED_REPORT_STAGES)
    assert Stage.PITCH_REPORT not in STAGE_ROUTINES


async def test_initial_idea_payload_uses_user_messages_only(fake_ai):
    prior = [
        _message("assistant", "Welcome, tell me about it."),
        _message("user", "Solar kiosks for villages."),
        _message("assistant", "Who pays?"),
    ]

    result = await analyze(fake_ai, Stage.INITIAL_IDEA, "Shop owners rent them.", prior)

    assert _payload(fake_ai) == "Solar kiosks for villages.\n\nShop owners rent them."
    assert result.reply == fake_ai.reply
    assert result.analysis["problemSolutionFit"] == 82
    assert result.analysis["entities"]["customers"] == ["village shop owners"]


async def test_later_stage_payload_uses_role_lines(fake_ai):
    prior = [
        _message("user", "Goal: 50 kiosks.", Stage.SMART_REFINEMENT),
        _message("assistant", "By when?", Stage.SMART_REFINEMENT),
    ]

    await analyze(fake_ai, Stage.SMART_REFINEMENT, "By the end of 2027.", prior)

    assert _payload(fake_ai) == "user: Goal: 50 kiosks.\n\nassistant: By when?\n\nuser: By the end of 2027."
    chat_prompt = next(payload for kind, _, payload in fake_ai.calls if kind == "chat")
    assert chat_prompt.endswith("user: By the end of 2027.")


async def test_context_of_earlier_stages_is_appended(fake_ai):
    context = {"initialIdea": {"keywords": ["solar"]}}

    await analyze(fake_ai, Stage.OPPORTUNITY_ANALYSIS, "How big is the market?", [], context=context)

    payload = _payload(fake_ai)
    assert payload.startswith("user: How big is the market?")
    assert "Findings from earlier stages" in payload
    assert '"keywords"' in payload


async def test_both_calls_are_made_for_an_analysed_stage(fake_ai):
    await analyze(fake_ai, Stage.GTM_STRATEGY, "Radio ads first?", [])

    kinds = sorted(kind for kind, _, _ in fake_ai.calls)
    assert kinds == ["chat", "extract"]


async def test_pitch_report_acknowledges_without_ai(fake_ai):
    result = await analyze(fake_ai, Stage.PITCH_REPORT, "Anything else?", [])

    assert result.reply == ACKNOWLEDGEMENT_REPLY
    assert result.analysis is None
    assert fake_ai.calls == []


@pytest.mark.parametrize("failure", ["fail_extract", "fail_chat"])
async def test_any_failed_call_raises_analysis_error(fake_ai, failure):
    setattr(fake_ai, failure, True)

    with pytest.raises(AnalysisError):
        await analyze(fake_ai, Stage.INITIAL_IDEA, "Solar kiosks.", [])


async def test_blank_reply_raises_analysis_error(fake_ai):
    fake_ai.reply = "   "

    with pytest.raises(AnalysisError):
        await analyze(fake_ai, Stage.SMART_REFINEMENT, "Goal: 50 kiosks.", [])


def test_scores_are_rounded_and_clamped():
    analysis = InitialIdeaAnalysis.model_validate({"problemSolutionFit": 140})
    assert analysis.problem_solution_fit == 100

    smart = normalize_stage_analysis(
        Stage.SMART_REFINEMENT,
        {"overallScore": -5, "specific": {"score": 72.6, "feedback": "ok"}},
    )
    assert smart["overallScore"] == 0
    assert smart["specific"]["score"] == 73


def test_unknown_keys_survive_normalization():
    data = normalize_stage_analysis(Stage.INITIAL_IDEA, {"keywords": ["a"], "founderNote": "keep me"})
    assert data == {"keywords": ["a"], "founderNote": "keep me"}


def test_pitch_report_analysis_is_stored_as_is():
    data = {"anything": {"goes": [1, 2]}}
    assert normalize_stage_analysis(Stage.PITCH_REPORT, data) == data


def test_malformed_analysis_is_rejected():
    with pytest.raises(ValidationError):
        normalize_stage_analysis(Stage.INITIAL_IDEA, {"keywords": "not-a-list"})
