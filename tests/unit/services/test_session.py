"""Tests for editor sessions: in-flight guard, credit gating, autosave wiring."""

from __future__ import annotations

import asyncio
import time

import pytest

from buildpilot.core import snippets
from buildpilot.core.errors import (
    ForbiddenError,
    InsufficientCreditsError,
    NotFoundError,
    SessionBusyError,
    SessionClosedError,
)
from buildpilot.core.templates import generate_initial_code
from buildpilot.models.project import Project
from buildpilot.services.credits import CreditLedger
from buildpilot.services.pipeline import AssistantPipeline
from buildpilot.services.session import EditorSession, SessionRegistry
from buildpilot.services.store import CREDIT_USAGE, USERS, MemoryRecordStore


def _project(code=None):
    return Project(
        id="p-1",
        user_id="u-1",
        name="Demo",
        type="react-vite",
        code=code if code is not None else generate_initial_code("react-vite", "blank", "Demo"),
        created_at="2025-01-01T00:00:00+00:00",
        updated_at="2025-01-01T00:00:00+00:00",
    )


class Saver:
    def __init__(self, ok=True):
        self.ok = ok
        self.calls = []

    def __call__(self, project_id, code):
        self.calls.append((project_id, code))
        return self.ok


@pytest.fixture
def ledger(store):
    return CreditLedger(store)


@pytest.fixture
def session_factory(store, ledger, make_user):
    def _make(credits=100, plan="free", delay=0.0, quiet=0.02, saver=None, code=None):
        user_id = make_user(credits=credits, plan=plan)
        saver = saver or Saver()
        session = EditorSession(
            session_id="s-1",
            user_id=user_id,
            project=_project(code),
            pipeline=AssistantPipeline(),
            ledger=ledger,
            save_code=saver,
            quiet_period=quiet,
            assistant_delay=delay,
        )
        return session, saver, user_id

    return _make


def test_session_starts_with_welcome_turn(session_factory):
    session, _, _ = session_factory()
    turns = session.log.all()
    assert len(turns) == 1
    assert turns[0].role == "assistant"
    assert "Welcome to Demo!" in turns[0].content


def test_submit_applies_rule_and_records_turns(session_factory):
    session, _, _ = session_factory()
    result = asyncio.run(session.submit("add a button"))

    assert result.accepted
    assert result.rule == "button"
    assert [m.role for m in result.messages] == ["user", "assistant"]
    assert session.code == result.code
    assert len(session.log) == 3


def test_empty_submit_is_ignored(session_factory, store):
    session, _, user_id = session_factory(credits=5)
    result = asyncio.run(session.submit("   \n"))

    assert not result.accepted
    assert len(session.log) == 1
    assert store.get(USERS, user_id)["credits"] == 5


def test_second_submit_while_in_flight_is_rejected(session_factory):
    session, _, _ = session_factory(delay=0.05)

    async def scenario():
        first = asyncio.create_task(session.submit("add a button"))
        await asyncio.sleep(0)
        assert session.busy
        with pytest.raises(SessionBusyError):
            await session.submit("add a form")
        await first
        assert not session.busy
        return len(session.log)

    assert asyncio.run(scenario()) == 3


def test_successful_turn_debits_one_credit(session_factory, store):
    session, _, user_id = session_factory(credits=3)
    asyncio.run(session.submit("add a button"))

    assert store.get(USERS, user_id)["credits"] == 2
    usage = store.select(CREDIT_USAGE, user_id=user_id)
    assert len(usage) == 1
    assert usage[0]["type"] == "ai_generation"


def test_fallback_turn_is_refunded(session_factory, store):
    session, _, user_id = session_factory(credits=3)
    result = asyncio.run(session.submit("make it purple and bouncy"))

    assert result.reply == snippets.FALLBACK_REPLY
    assert store.get(USERS, user_id)["credits"] == 3


def test_zero_credits_blocks_submit(session_factory):
    session, _, _ = session_factory(credits=0)
    with pytest.raises(InsufficientCreditsError):
        asyncio.run(session.submit("add a button"))
    assert len(session.log) == 1
    assert not session.busy


def test_premium_plan_is_not_debited(session_factory, store):
    session, _, user_id = session_factory(credits=0, plan="premium")
    result = asyncio.run(session.submit("add a button"))

    assert result.accepted
    assert store.get(USERS, user_id)["credits"] == 0


def test_result_discarded_when_closed_mid_flight(session_factory, store):
    session, saver, user_id = session_factory(credits=2, delay=0.05)
    original = session.code

    async def scenario():
        task = asyncio.create_task(session.submit("add a button"))
        await asyncio.sleep(0)
        session.close()
        return await task

    result = asyncio.run(scenario())

    assert not result.accepted
    assert session.code == original
    assert [t.role for t in session.log.all()] == ["assistant", "user"]
    assert store.get(USERS, user_id)["credits"] == 2
    assert saver.calls == []


def test_submit_after_close_raises(session_factory):
    session, _, _ = session_factory()
    session.close()
    with pytest.raises(SessionClosedError):
        asyncio.run(session.submit("add a button"))


def test_rule_result_is_autosaved(session_factory):
    session, saver, _ = session_factory(quiet=0.02)

    async def scenario():
        await session.submit("add a button")
        await asyncio.sleep(0.08)
        await session.debouncer.wait_idle()

    asyncio.run(scenario())
    assert saver.calls == [("p-1", session.code)]


def test_direct_edits_coalesce_and_skip_unchanged(session_factory):
    session, saver, _ = session_factory(quiet=0.03)
    original = session.code

    async def scenario():
        session.edit(original + "\n// a")
        session.edit(original + "\n// ab")
        await asyncio.sleep(0.1)
        await session.debouncer.wait_idle()
        # back to the saved value: nothing new to write
        session.edit(original + "\n// ab")
        await asyncio.sleep(0.1)
        await session.debouncer.wait_idle()

    asyncio.run(scenario())
    assert saver.calls == [("p-1", original + "\n// ab")]


def test_edit_during_flight_is_kept(session_factory):
    session, _, _ = session_factory(delay=0.05, code="<div>X</div>\n    </div>")

    async def scenario():
        task = asyncio.create_task(session.submit("add a button"))
        await asyncio.sleep(0)
        session.edit("<p>edited</p>\n<div>Y</div>\n    </div>")
        return await task

    result = asyncio.run(scenario())
    assert result.code.startswith("<p>edited</p>\n<div>Y")
    assert "<button" in result.code


def test_state_snapshot(session_factory):
    session, _, _ = session_factory()
    state = session.state()
    assert state.session_id == "s-1"
    assert state.active_file == "src/App.tsx"
    assert state.busy is False
    assert len(state.messages) == 1


# ------------------------------------------------------------------
# Registry
# ------------------------------------------------------------------

def test_registry_scopes_sessions_to_owner(ledger):
    registry = SessionRegistry(AssistantPipeline(), ledger, Saver())
    session = registry.open("u-1", _project())

    assert registry.get(session.session_id, "u-1") is session
    with pytest.raises(ForbiddenError):
        registry.get(session.session_id, "someone-else")


def test_registry_close_removes_session(ledger):
    registry = SessionRegistry(AssistantPipeline(), ledger, Saver())
    session = registry.open("u-1", _project())
    registry.close(session.session_id, "u-1")

    assert session.closed
    with pytest.raises(NotFoundError):
        registry.get(session.session_id)


def test_registry_close_all(ledger):
    registry = SessionRegistry(AssistantPipeline(), ledger, Saver())
    sessions = [registry.open("u-1", _project()) for _ in range(3)]
    registry.close_all()
    assert all(s.closed for s in sessions)
    assert registry.sessions() == []


def test_registry_expires_idle_sessions_and_drops_pending_autosave(ledger):
    saver = Saver()
    registry = SessionRegistry(AssistantPipeline(), ledger, saver, quiet_period=0.2, idle_timeout=0.05)

    async def scenario():
        idle = registry.open("u-1", _project())
        idle.edit("unsaved change")
        assert idle.debouncer.pending
        await asyncio.sleep(0.1)
        fresh = registry.open("u-1", _project())
        await asyncio.sleep(0.25)
        return idle, fresh

    idle, fresh = asyncio.run(scenario())

    assert idle.closed
    assert not idle.debouncer.pending
    assert saver.calls == []
    assert registry.sessions() == [fresh]
    with pytest.raises(NotFoundError):
        registry.get(idle.session_id)


def test_registry_get_keeps_session_alive(ledger):
    registry = SessionRegistry(AssistantPipeline(), ledger, Saver(), idle_timeout=0.1)
    session = registry.open("u-1", _project())
    for _ in range(4):
        time.sleep(0.04)
        assert registry.get(session.session_id, "u-1") is session
    assert registry.has_open("p-1")


def test_registry_has_open_ignores_stale_sessions(ledger):
    registry = SessionRegistry(AssistantPipeline(), ledger, Saver(), idle_timeout=0.05)
    registry.open("u-1", _project())
    assert registry.has_open("p-1")
    time.sleep(0.1)
    assert not registry.has_open("p-1")


class SlowCreditStore(MemoryRecordStore):
    def increment_credits(self, user_id, amount):
        time.sleep(0.2)
        return super().increment_credits(user_id, amount)


def test_credit_calls_do_not_block_the_event_loop():
    store = SlowCreditStore()
    user = store.insert(
        USERS,
        {"email": "slow@example.com", "name": "Slow", "credits": 5, "plan": "free", "referral_code": "SLOW0001"},
    )
    session = EditorSession(
        session_id="s-slow",
        user_id=user["id"],
        project=_project(),
        pipeline=AssistantPipeline(),
        ledger=CreditLedger(store),
        save_code=Saver(),
        quiet_period=1.0,
        assistant_delay=0.0,
    )

    async def scenario():
        loop = asyncio.get_running_loop()
        gaps = []

        async def ticker():
            last = loop.time()
            for _ in range(15):
                await asyncio.sleep(0.02)
                now = loop.time()
                gaps.append(now - last)
                last = now

        ticks = asyncio.create_task(ticker())
        # fallback reply: one debit and one refund, both slow
        result = await session.submit("make it purple and bouncy")
        await ticks
        return result, max(gaps)

    result, worst_gap = asyncio.run(scenario())
    assert result.accepted
    assert worst_gap < 0.15
    assert store.get(USERS, user["id"])["credits"] == 5
