"""
Persistence contract for ventures and everything hanging off them.

Controllers talk to a ``VentureStore`` only; the concrete adapter (in-memory
or SQL) is picked at app creation.  Records are the SQLModel table classes
from ``venturelab.models`` in both adapters.

Upsert arguments left as ``None`` mean "keep the stored value".
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any
from uuid import UUID

from venturelab.core.stages import Stage
from venturelab.models.chat_message import ChatMessage
from venturelab.models.report import Report
from venturelab.models.stage_content import StageContent
from venturelab.models.venture import Venture


class StorageError(Exception):
    """The backing store failed; surfaced to clients as a 500."""


def stage_key(stage: Stage | str) -> str:
    return Stage(stage).value


class VentureStore(ABC):
    backend_name: str = "abstract"

    async def startup(self) -> None:
        """Prepare the store (connections, schema). No-op by default."""

    async def shutdown(self) -> None:
        """Release resources held by the store. No-op by default."""

    # ── Ventures ──────────────────────────────────────────────

    @abstractmethod
    async def list_ventures(self, user_id: UUID) -> list[Venture]:
        """Return the ventures of *user_id*, most recently updated first."""

    @abstractmethod
    async def get_venture(self, venture_id: UUID) -> Venture | None: ...

    @abstractmethod
    async def get_venture_by_share_token(self, token: str) -> Venture | None: ...

    @abstractmethod
    async def create_venture(
        self,
        *,
        user_id: UUID,
        title: str,
        current_stage: int = 1,
        is_completed: bool = False,
    ) -> Venture: ...

    @abstractmethod
    async def update_venture(self, venture_id: UUID, **fields: Any) -> Venture | None:
        """Overwrite the given columns and bump ``updated_at``. None if missing."""

    @abstractmethod
    async def advance_venture(self, venture_id: UUID, rank: int) -> Venture | None:
        """Move ``current_stage`` to *rank* in one step, never backwards.

        Returns None when the venture is missing or already past *rank*.
        """

    @abstractmethod
    async def delete_venture(self, venture_id: UUID) -> bool:
        """Delete a venture with its stage contents, messages and report."""

    # ── Stage contents ────────────────────────────────────────

    @abstractmethod
    async def get_stage_content(self, venture_id: UUID, stage: Stage | str) -> StageContent | None: ...

    @abstractmethod
    async def list_stage_contents(self, venture_id: UUID) -> list[StageContent]:
        """Return every stage content of the venture in canonical stage order."""

    @abstractmethod
    async def upsert_stage_content(
        self,
        venture_id: UUID,
        stage: Stage | str,
        *,
        content: dict | None = None,
        ai_analysis: dict | None = None,
        is_completed: bool | None = None,
    ) -> StageContent: ...

    # ── Conversation ──────────────────────────────────────────

    @abstractmethod
    async def list_messages(self, venture_id: UUID, stage: Stage | str) -> list[ChatMessage]:
        """Return the conversation for (venture, stage), oldest first."""

    @abstractmethod
    async def add_message(
        self,
        venture_id: UUID,
        stage: Stage | str,
        role: str,
        content: str,
    ) -> ChatMessage: ...

    # ── Reports ───────────────────────────────────────────────

    @abstractmethod
    async def get_report(self, venture_id: UUID) -> Report | None: ...

    @abstractmethod
    async def upsert_report(
        self,
        venture_id: UUID,
        *,
        title: str,
        full_report: dict,
        pitch_deck: list,
        elevator_pitch: str,
        full_pitch: str,
    ) -> Report:
        """Create the venture's report or overwrite it in place (id kept)."""
