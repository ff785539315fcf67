"""
SQLModel / SQLAlchemy adapter for ``VentureStore``.

Works on PostgreSQL (asyncpg) and SQLite (aiosqlite).  Upserts are single
``INSERT ... ON CONFLICT DO UPDATE`` statements built with the dialect's own
``insert`` construct, and the stage pointer moves through one conditional
``UPDATE``, so concurrent writers never see a read-modify-write gap.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import delete, func, select, text, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import venturelab.models  # noqa: F401  (registers every table on SQLModel.metadata)
from venturelab.core.stages import Stage
from venturelab.models.base import utc_now
from venturelab.models.chat_message import ChatMessage
from venturelab.models.report import Report
from venturelab.models.stage_content import StageContent
from venturelab.models.venture import Venture
from venturelab.storage.base import StorageError, VentureStore, stage_key

logger = logging.getLogger(__name__)

_DIALECT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class SQLStore(VentureStore):
    backend_name = "sql"

    def __init__(self, engine: AsyncEngine, *, create_tables: bool = False) -> None:
        self.engine = engine
        self.create_tables = create_tables
        self._sessionmaker = async_sessionmaker(
            engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session that commits on success; DB failures become StorageError."""
        try:
            async with self._sessionmaker() as session:
                try:
                    yield session
                    await session.commit()
                except Exception:
                    await session.rollback()
                    raise
        except SQLAlchemyError as exc:
            logger.error("Database operation failed: %s", exc, exc_info=True)
            raise StorageError(str(exc)) from exc

    def _insert(self, model: type[SQLModel]):
        dialect = self.engine.dialect.name
        try:
            return _DIALECT_INSERTS[dialect](model)
        except KeyError:
            raise StorageError(f"Unsupported database dialect: {dialect}") from None

    # ── Lifecycle ─────────────────────────────────────────────

    async def startup(self) -> None:
        try:
            async with self.engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
                if self.create_tables:
                    await conn.run_sync(SQLModel.metadata.create_all)
        except SQLAlchemyError as exc:
            raise StorageError(str(exc)) from exc
        logger.info("SQL store ready (%s)", self.engine.dialect.name)

    async def shutdown(self) -> None:
        await self.engine.dispose()

    # ── Ventures ──────────────────────────────────────────────

    async def list_ventures(self, user_id: UUID) -> list[Venture]:
        async with self._session() as db:
            result = await db.execute(
                select(Venture)
                .where(Venture.user_id == user_id)
                .order_by(Venture.updated_at.desc())
            )
            return list(result.scalars().all())

    async def get_venture(self, venture_id: UUID) -> Venture | None:
        async with self._session() as db:
            return await db.get(Venture, venture_id)

    async def get_venture_by_share_token(self, token: str) -> Venture | None:
        async with self._session() as db:
            result = await db.execute(select(Venture).where(Venture.share_token == token))
            return result.scalars().first()

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
        async with self._session() as db:
            db.add(venture)
        return venture

    async def update_venture(self, venture_id: UUID, **fields: Any) -> Venture | None:
        async with self._session() as db:
            result = await db.execute(
                update(Venture)
                .where(Venture.id == venture_id)
                .values(**fields, updated_at=utc_now())
                .returning(Venture),
                execution_options={"populate_existing": True},
            )
            return result.scalars().first()

    async def advance_venture(self, venture_id: UUID, rank: int) -> Venture | None:
        async with self._session() as db:
            result = await db.execute(
                update(Venture)
                .where(Venture.id == venture_id, Venture.current_stage <= rank)
                .values(current_stage=rank, updated_at=utc_now())
                .returning(Venture),
                execution_options={"populate_existing": True},
            )
            return result.scalars().first()

    async def delete_venture(self, venture_id: UUID) -> bool:
        async with self._session() as db:
            # Explicit cascade: SQLite does not enforce foreign keys by default
            await db.execute(delete(ChatMessage).where(ChatMessage.venture_id == venture_id))
            await db.execute(delete(StageContent).where(StageContent.venture_id == venture_id))
            await db.execute(delete(Report).where(Report.venture_id == venture_id))
            result = await db.execute(delete(Venture).where(Venture.id == venture_id))
            return result.rowcount > 0

    # ── Stage contents ────────────────────────────────────────

    async def get_stage_content(self, venture_id: UUID, stage: Stage | str) -> StageContent | None:
        async with self._session() as db:
            result = await db.execute(
                select(StageContent).where(
                    StageContent.venture_id == venture_id,
                    StageContent.stage == stage_key(stage),
                )
            )
            return result.scalars().first()

    async def list_stage_contents(self, venture_id: UUID) -> list[StageContent]:
        async with self._session() as db:
            result = await db.execute(select(StageContent).where(StageContent.venture_id == venture_id))
            contents = list(result.scalars().all())
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
        now = utc_now()
        changes: dict[str, Any] = {"updated_at": now}
        if content is not None:
            changes["content"] = content
        if ai_analysis is not None:
            changes["ai_analysis"] = ai_analysis
        if is_completed is not None:
            changes["is_completed"] = is_completed

        stmt = self._insert(StageContent).values(
            id=uuid4(),
            venture_id=venture_id,
            stage=stage_key(stage),
            content=content if content is not None else {},
            ai_analysis=ai_analysis,
            is_completed=bool(is_completed),
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["venture_id", "stage"],
            set_=changes,
        ).returning(StageContent)

        async with self._session() as db:
            result = await db.execute(stmt, execution_options={"populate_existing": True})
            return result.scalars().one()

    # ── Conversation ──────────────────────────────────────────

    async def list_messages(self, venture_id: UUID, stage: Stage | str) -> list[ChatMessage]:
        async with self._session() as db:
            result = await db.execute(
                select(ChatMessage)
                .where(
                    ChatMessage.venture_id == venture_id,
                    ChatMessage.stage == stage_key(stage),
                )
                .order_by(ChatMessage.seq.asc(), ChatMessage.created_at.asc())
            )
            return list(result.scalars().all())

    async def add_message(
        self,
        venture_id: UUID,
        stage: Stage | str,
        role: str,
        content: str,
    ) -> ChatMessage:
        message = ChatMessage(venture_id=venture_id, stage=stage_key(stage), role=role, content=content)
        async with self._session() as db:
            result = await db.execute(
                select(func.coalesce(func.max(ChatMessage.seq), 0)).where(
                    ChatMessage.venture_id == venture_id,
                    ChatMessage.stage == message.stage,
                )
            )
            message.seq = result.scalar_one() + 1
            db.add(message)
        return message

    # ── Reports ───────────────────────────────────────────────

    async def get_report(self, venture_id: UUID) -> Report | None:
        async with self._session() as db:
            result = await db.execute(select(Report).where(Report.venture_id == venture_id))
            return result.scalars().first()

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
        fields = {
            "title": title,
            "full_report": full_report,
            "pitch_deck": pitch_deck,
            "elevator_pitch": elevator_pitch,
            "full_pitch": full_pitch,
        }
        stmt = self._insert(Report).values(
            id=uuid4(),
            venture_id=venture_id,
            created_at=utc_now(),
            **fields,
        )
        stmt = stmt.on_conflict_do_update(index_elements=["venture_id"], set_=fields).returning(Report)

        async with self._session() as db:
            result = await db.execute(stmt, execution_options={"populate_existing": True})
            return result.scalars().one()
