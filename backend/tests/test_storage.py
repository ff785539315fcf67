"""Contract tests run against both storage adapters."""

from datetime import timedelta
from uuid import uuid4

from sqlalchemy import update

from venturelab.core.stages import Stage
from venturelab.db.database import create_engine
from venturelab.models.chat_message import ChatMessage
from venturelab.storage.sql import SQLStore


async def test_create_and_fetch_venture(any_store):
    user_id = uuid4()
    venture = await any_store.create_venture(user_id=user_id, title="Solar Kiosk")

    fetched = await any_store.get_venture(venture.id)
    assert fetched is not None
    assert fetched.title == "Solar Kiosk"
    assert fetched.current_stage == 1
    assert fetched.is_completed is False
    assert [v.id for v in await any_store.list_ventures(user_id)] == [venture.id]
    assert await any_store.list_ventures(uuid4()) == []


async def test_update_venture_overwrites_given_fields(any_store):
    venture = await any_store.create_venture(user_id=uuid4(), title="Old")

    updated = await any_store.update_venture(venture.id, title="New", is_completed=True)

    assert updated.title == "New"
    assert updated.is_completed is True
    assert await any_store.update_venture(uuid4(), title="Ghost") is None


async def test_advance_venture_only_moves_forward(any_store):
    venture = await any_store.create_venture(user_id=uuid4(), title="Solar Kiosk")

    advanced = await any_store.advance_venture(venture.id, 4)
    assert advanced.current_stage == 4

    assert await any_store.advance_venture(venture.id, 2) is None
    assert (await any_store.get_venture(venture.id)).current_stage == 4


async def test_stage_content_upsert_keeps_omitted_fields(any_store):
    venture = await any_store.create_venture(user_id=uuid4(), title="Solar Kiosk")

    first = await any_store.upsert_stage_content(
        venture.id, Stage.INITIAL_IDEA, content={"idea": "kiosks"}, ai_analysis={"keywords": ["solar"]}
    )
    second = await any_store.upsert_stage_content(venture.id, Stage.INITIAL_IDEA, is_completed=True)

    assert second.id == first.id
    assert second.content == {"idea": "kiosks"}
    assert second.ai_analysis == {"keywords": ["solar"]}
    assert second.is_completed is True
    assert len(await any_store.list_stage_contents(venture.id)) == 1


async def test_stage_contents_listed_in_canonical_order(any_store):
    venture = await any_store.create_venture(user_id=uuid4(), title="Solar Kiosk")
    for stage in (Stage.GTM_STRATEGY, Stage.INITIAL_IDEA, Stage.VENTURE_THESIS):
        await any_store.upsert_stage_content(venture.id, stage, content={})

    stages = [sc.stage for sc in await any_store.list_stage_contents(venture.id)]
    assert stages == ["initialIdea", "ventureThesis", "gtmStrategy"]


async def test_messages_are_kept_in_insertion_order_per_stage(any_store):
    venture = await any_store.create_venture(user_id=uuid4(), title="Solar Kiosk")
    await any_store.add_message(venture.id, Stage.INITIAL_IDEA, "assistant", "Welcome")
    await any_store.add_message(venture.id, Stage.INITIAL_IDEA, "user", "Solar kiosks")
    await any_store.add_message(venture.id, Stage.SMART_REFINEMENT, "user", "Goals")

    messages = await any_store.list_messages(venture.id, Stage.INITIAL_IDEA)
    assert [(m.role, m.content) for m in messages] == [("assistant", "Welcome"), ("user", "Solar kiosks")]


async def test_report_upsert_overwrites_in_place(any_store):
    venture = await any_store.create_venture(user_id=uuid4(), title="Solar Kiosk")
    fields = {"full_report": {"summary": "v1"}, "pitch_deck": [], "elevator_pitch": "e", "full_pitch": "f"}

    first = await any_store.upsert_report(venture.id, title="Solar Kiosk", **fields)
    second = await any_store.upsert_report(
        venture.id, title="Solar Kiosk", **{**fields, "full_report": {"summary": "v2"}}
    )

    assert second.id == first.id
    assert (await any_store.get_report(venture.id)).full_report == {"summary": "v2"}


async def test_delete_venture_cascades(any_store):
    venture = await any_store.create_venture(user_id=uuid4(), title="Solar Kiosk")
    await any_store.upsert_stage_content(venture.id, Stage.INITIAL_IDEA, content={})
    await any_store.add_message(venture.id, Stage.INITIAL_IDEA, "user", "hi")
    await any_store.upsert_report(
        venture.id, title="t", full_report={}, pitch_deck=[], elevator_pitch="", full_pitch=""
    )

    assert await any_store.delete_venture(venture.id) is True

    assert await any_store.get_venture(venture.id) is None
    assert await any_store.list_stage_contents(venture.id) == []
    assert await any_store.list_messages(venture.id, Stage.INITIAL_IDEA) == []
    assert await any_store.get_report(venture.id) is None
    assert await any_store.delete_venture(venture.id) is False


async def test_share_token_lookup(any_store):
    venture = await any_store.create_venture(user_id=uuid4(), title="Solar Kiosk")
    await any_store.update_venture(venture.id, share_token="abc123", is_public=True)

    found = await any_store.get_venture_by_share_token("abc123")
    assert found.id == venture.id
    assert await any_store.get_venture_by_share_token("nope") is None


async def test_messages_carry_insertion_sequence_per_stage(any_store):
    venture = await any_store.create_venture(user_id=uuid4(), title="Solar Kiosk")
    await any_store.add_message(venture.id, Stage.INITIAL_IDEA, "assistant", "Welcome")
    await any_store.add_message(venture.id, Stage.SMART_REFINEMENT, "user", "Goals")
    await any_store.add_message(venture.id, Stage.INITIAL_IDEA, "user", "Solar kiosks")

    initial = await any_store.list_messages(venture.id, Stage.INITIAL_IDEA)
    smart = await any_store.list_messages(venture.id, Stage.SMART_REFINEMENT)
    assert [m.seq for m in initial] == [1, 2]
    assert [m.seq for m in smart] == [1]


async def test_sql_message_order_survives_timestamp_ties():
    store = SQLStore(create_engine("sqlite+aiosqlite:///:memory:"), create_tables=True)
    await store.startup()
    try:
        venture = await store.create_venture(user_id=uuid4(), title="Solar Kiosk")
        first = await store.add_message(venture.id, Stage.INITIAL_IDEA, "user", "first")
        second = await store.add_message(venture.id, Stage.INITIAL_IDEA, "assistant", "second")
        third = await store.add_message(venture.id, Stage.INITIAL_IDEA, "user", "third")

        # Same clock reading for all three, and the last one even earlier
        async with store.engine.begin() as conn:
            await conn.execute(
                update(ChatMessage)
                .where(ChatMessage.id.in_([second.id, third.id]))
                .values(created_at=first.created_at)
            )
            await conn.execute(
                update(ChatMessage)
                .where(ChatMessage.id == third.id)
                .values(created_at=first.created_at - timedelta(seconds=1))
            )

        messages = await store.list_messages(venture.id, Stage.INITIAL_IDEA)
        assert [m.content for m in messages] == ["first", "second", "third"]
    finally:
        await store.shutdown()
