# Import all models so SQLModel.metadata registers them for Alembic autogenerate.
from venturelab.models.base import BaseUUIDModel  # noqa: F401
from venturelab.models.venture import Venture  # noqa: F401
from venturelab.models.stage_content import StageContent  # noqa: F401
from venturelab.models.chat_message import ChatMessage  # noqa: F401
from venturelab.models.report import Report  # noqa: F401
