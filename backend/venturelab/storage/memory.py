import asyncio
from typing import Any
from uuid import UUID

from venturelab.core.stages import Stage
from venturelab.models.base import utc_now
from venturelab.models.chat_message import ChatMessage
from venturelab.models.report import Report
from venturelab.models.stage_content import StageContent
from venturelab.models.venture import Venture
from venturelab.storage.base import VentureStore, stage_key


class MemoryStore(VentureStore):
    """Dict-backed store for development and tests. State dies with the process."""

    backend_name = "memory"

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._ventures: dict[UUID, Venture] = {}
        self._stage_contents: dict[tuple[UUID, str], StageContent] = {}
        self._messages: dict[tuple[UUID, str], list[ChatMessage]] = {}
        self._reports: dict[UUID, Report] = {}

    # ── Ventures ──────────────────────────────────────────────

    async def list_ventures(self, user_id: UUID) -> list[Venture]:
        ventures = [v for v in self._ventures.values() if v.user_id == user_id]
        return sorted(ventures, key=lambda v: v.updated_at, reverse=True)

    async def get_venture(self, venture_id: UUID) -> Venture | None:
        return self._ventures.get(venture_id)

    async def get_venture_by_share_token(self, token: str) -> Venture | None:
        for venture in self._ventures.values():
            if venture.share_token == token:
                return venture
        return None

    async def create_venture(
        self,
        *,
        user_id: UUID,
        title: str,
        current_stage: int = 1,
        is_completed: bool = False,
    ) -> Venture:
        venture = Venture(
            user_id=user_id,
            title=title,
            current_stage=current_stage,
            is_completed=is_completed,
        )
        async with self._lock:
            self._ventures[venture.id] = venture
        return venture

    async def update_venture(self, venture_id: UUID, **fields: Any) -> Venture | None:
        async with self._lock:
            venture = self._ventures.get(venture_id)
            if venture is None:
                return None
            for key, value in fields.items():
                setattr(venture, key, value)
            venture.updated_at = utc_now()
            return venture

    async def advance_venture(self, venture_id: UUID, rank: int) -> Venture | None:
        async with self._lock:
            venture = self._ventures.get(venture_id)
            if venture is None or venture.current_stage > rank:
                return None
            venture.current_stage = rank
            venture.updated_at = utc_now()
            return venture

    async def delete_venture(self, venture_id: UUID) -> bool:
        async with self._lock:
            if self._ventures.pop(venture_id, None) is None:
                return False
            for key in [k for k in self._stage_contents if k[0] == venture_id]:
                del self._stage_contents[key]
            for key in [k for k in self._messages if k[0] == venture_id]:
                del self._messages[key]
            self._reports.pop(venture_id, None)
            return True

    # ── Stage contents ────────────────────────────────────────

    async def get_stage_content(self, venture_id: UUID, stage: Stage | str) -> StageContent | None:
        return self._stage_contents.get((venture_id, stage_key(stage)))

    async def list_stage_contents(self, venture_id: UUID) -> list[StageContent]:
        contents = [sc for (vid, _), sc in self._stage_contents.items() if vid == venture_id]
        return sorted(contents, key=lambda sc: Stage(sc.stage).order)

    async def upsert_stage_content(
        self,
        venture_id: UUID,
        stage: Stage | str,
        *,
        content: dict | None = None,
        ai_analysis: dict | None = None,
        is_completed: bool | None = None,
    ) -> StageContent:
        key = (venture_id, stage_key(stage))
        async with self._lock:
            row = self._stage_contents.get(key)
            if row is None:
                row = StageContent(
                    venture_id=venture_id,
                    stage=key[1],
                    content=content if content is not None else {},
                    ai_analysis=ai_analysis,
                    is_completed=bool(is_completed),
                )
                self._stage_contents[key] = row
                return row

            if content is not None:
                row.content = content
            if ai_analysis is not None:
                row.ai_analysis = ai_analysis
            if is_completed is not None:
                row.is_completed = is_completed
            row.updated_at = utc_now()
            return row

    # ── Conversation ──────────────────────────────────────────

    async def list_messages(self, venture_id: UUID, stage: Stage | str) -> list[ChatMessage]:
        return list(self._messages.get((venture_id, stage_key(stage)), []))

    async def add_message(
        self,
        venture_id: UUID,
        stage: Stage | str,
        role: str,
        content: str,
    ) -> ChatMessage:
        message = ChatMessage(venture_id=venture_id, stage=stage_key(stage), role=role, content=content)
        async with self._lock:
            thread = self._messages.setdefault((venture_id, message.stage), [])
            message.seq = len(thread) + 1
            thread.append(message)
        return message

    # ── Reports ───────────────────────────────────────────────

    async def get_report(self, venture_id: UUID) -> Report | None:
        return self._reports.get(venture_id)

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
        async with self._lock:
            report = self._reports.get(venture_id)
            if report is None:
                report = Report(venture_id=venture_id, title=title)
                self._reports[venture_id] = report
            report.title = title
            report.full_report = full_report
            report.pitch_deck = pitch_deck
            report.elevator_pitch = elevator_pitch
            report.full_pitch = full_pitch
            return report
