from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient

from venturelab.core.ai_client import AIServiceError
from venturelab.main import create_app
from venturelab.schemas.analysis import (
    GTMAnalysis,
    InitialIdeaAnalysis,
    MarketAnalysis,
    SmartAnalysis,
    VentureThesisAnalysis,
    ViabilityAnalysis,
)
from venturelab.db.database import create_engine
from venturelab.schemas.report import ReportDraft
from venturelab.storage.memory import MemoryStore
from venturelab.storage.sql import SQLStore

DEFAULT_OUTPUTS: dict[type, dict[str, Any]] = {
    InitialIdeaAnalysis: {
        "keywords": ["solar", "kiosk", "rural"],
        "problemSolutionFit": 82,
        "suggestedAspects": ["maintenance costs"],
        "entities": {
            "problems": ["unreliable grid"],
            "solutions": ["solar charging kiosks"],
            "customers": ["village shop owners"],
            "market": ["off-grid households"],
        },
    },
    SmartAnalysis: {
        "specific": {"score": 70, "feedback": "Name the first region."},
        "timeBound": {"score": 40, "feedback": "Add a launch date."},
        "overallScore": 61,
        "nextSteps": ["Pick a pilot village"],
    },
    MarketAnalysis: {
        "marketSize": {"tam": "$2B", "sam": "$300M", "som": "$12M", "description": "Off-grid charging"},
        "opportunityScore": 74,
        "marketInsights": ["Mobile money adoption is rising"],
    },
    VentureThesisAnalysis: {
        "vision": "Power for every village",
        "roadmap": {"shortTerm": ["Pilot"], "longTerm": ["Regional network"]},
        "overallScore": 68,
    },
    ViabilityAnalysis: {
        "marketAssessment": {"demandLevel": "high", "competitivePressure": "low"},
        "riskAssessment": {"keyRisks": [{"risk": "Theft", "impact": "medium"}], "successProbability": 55},
        "viabilityScore": 63,
    },
    GTMAnalysis: {
        "marketingStrategy": {"channels": [{"name": "Radio", "effectiveness": 80}]},
        "overallScore": 71,
    },
    ReportDraft: {
        "fullReport": {
            "executiveSummary": "Solar kiosks for off-grid villages.",
            "marketAnalysis": {"size": "$2B", "trends": ["Mobile money", "Cheaper panels"]},
        },
        "pitchDeck": [
            {"title": "Problem", "content": "Villages lack reliable power."},
            {"title": "Solution", "content": ["Solar kiosks", "Pay per charge"]},
        ],
        "elevatorPitch": "We bring reliable solar charging to off-grid villages.",
        "fullPitch": "Imagine a village where every phone stays charged.",
    },
}


class FakeAIClient:
    """In-process stand-in for the model: canned outputs, switchable failures."""

    def __init__(self) -> None:
        self.outputs = dict(DEFAULT_OUTPUTS)
        self.reply = "Thanks! Here is what stands out in your idea."
        self.fail_extract = False
        self.fail_chat = False
        self.fail_report = False
        self.calls: list[tuple[str, str, str]] = []

    async def extract(self, system_prompt: str, payload: str, output_type: type):
        self.calls.append(("extract", output_type.__name__, payload))
        if output_type is ReportDraft:
            if self.fail_report:
                raise AIServiceError("report model unavailable")
        elif self.fail_extract:
            raise AIServiceError("extraction model unavailable")
        return output_type.model_validate(self.outputs.get(output_type, {}))

    async def chat(self, system_prompt: str, prompt: str) -> str:
        self.calls.append(("chat", "str", prompt))
        if self.fail_chat:
            raise AIServiceError("chat model unavailable")
        return self.reply


@pytest.fixture()
def fake_ai() -> FakeAIClient:
    return FakeAIClient()


def make_store(kind: str):
    if kind == "memory":
        return MemoryStore()
    return SQLStore(create_engine("sqlite+aiosqlite:///:memory:"), create_tables=True)


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Both adapters; the app lifespan starts and stops them."""
    return make_store(request.param)


@pytest.fixture(params=["memory", "sql"])
async def any_store(request):
    """Both adapters, started for direct use in async tests."""
    store = make_store(request.param)
    await store.startup()
    yield store
    await store.shutdown()


@pytest.fixture()
def client(store, fake_ai):
    with TestClient(create_app(store=store, ai_client=fake_ai)) as c:
        yield c


@pytest.fixture()
def venture(client) -> dict:
    response = client.post("/api/ventures", json={"title": "Solar Kiosk"})
    assert response.status_code == 201
    return response.json()


REQUIRED_STAGE_IDS = [
    "initialIdea",
    "smartRefinement",
    "opportunityAnalysis",
    "ventureThesis",
    "viabilityAssessment",
    "gtmStrategy",
]


def complete_required_stages(client: TestClient, venture_id: str, stages=REQUIRED_STAGE_IDS) -> None:
    for stage in stages:
        response = client.post(f"/api/ventures/{venture_id}/stages/{stage}/complete", json={})
        assert response.status_code == 200
