from pydantic import Field

from venturelab.schemas.base import CamelModel
from venturelab.schemas.report import ReportRead
from venturelab.schemas.stage import StageContentRead
from venturelab.schemas.venture import VentureRead


class AutopilotRequest(CamelModel):
    idea: str = Field(min_length=10)
    generate_report: bool = True


class AutopilotResponse(CamelModel):
    venture: VentureRead
    stages: list[StageContentRead]
    report: ReportRead | None = None
