"""Tests for the single-slot pending question."""

import asyncio

import pytest

from pantry_assistant.services.conversation import ConversationStore
from pantry_assistant.services.pending_question import PendingQuestionSlot


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def slot(clock):
    return PendingQuestionSlot(timeout_seconds=120, clock=clock)


def test_empty_by_default(slot):
    assert slot.get() is None


def test_set_and_get(slot):
    slot.set("fish")
    assert slot.get() == "fish"


def test_last_ask_wins(slot):
    slot.set("fish")
    slot.set("bread")
    assert slot.get() == "bread"


def test_clear(slot):
    slot.set("fish")
    slot.clear()
    assert slot.get() is None


def test_expires_after_timeout(slot, clock):
    slot.set("fish")
    clock.now += 119
    assert slot.get() == "fish"
    clock.now += 1
    assert slot.get() is None
    assert slot.last_expired == "fish"


def test_new_set_resets_timeout(slot, clock):
    slot.set("fish")
    clock.now += 100
    slot.set("bread")
    clock.now += 100
    assert slot.get() == "bread"


def test_stale_timer_is_a_no_op(slot):
    """A timer armed before a turn resolved must not clear the newer state."""
    slot.set("fish")
    armed_generation = slot.generation
    slot.set("bread")
    assert slot.expire(armed_generation) is None
    assert slot.get() == "bread"


def test_current_timer_expires(slot):
    slot.set("fish")
    assert slot.expire(slot.generation) == "fish"
    assert slot.get() is None


@pytest.mark.asyncio
async def test_scheduled_expiry_fires():
    slot = PendingQuestionSlot(timeout_seconds=0.01)
    expired = []
    slot.set("fish")
    slot.schedule_expiry(on_expired=expired.append)
    await asyncio.sleep(0.05)
    assert expired == ["fish"]
    assert slot.get() is None


@pytest.mark.asyncio
async def test_clear_cancels_scheduled_expiry():
    slot = PendingQuestionSlot(timeout_seconds=0.01)
    expired = []
    slot.set("fish")
    slot.schedule_expiry(on_expired=expired.append)
    slot.clear()
    await asyncio.sleep(0.05)
    assert expired == []


def test_conversation_store_keeps_one_slot_per_user():
    store = ConversationStore(timeout_seconds=120)
    store.get(1).pending.set("fish")
    assert store.get(1).pending.get() == "fish"
    assert store.get(2).pending.get() is None
    assert store.get(1) is store.get(1)


def test_conversation_store_drops_idle_conversations(clock):
    store = ConversationStore(timeout_seconds=120, idle_seconds=300, clock=clock)
    store.get(1)
    store.get(2).pending.set("fish")
    store.get(3)

    clock.now += 301
    store.get(3)
    store.get(4)

    # 1 was idle with nothing pending; 2 still has a question; 3 was just used
    assert len(store) == 3
    assert store.get(2).pending.get() == "fish"


def test_conversation_store_keeps_recent_conversations(clock):
    store = ConversationStore(timeout_seconds=120, idle_seconds=300, clock=clock)
    first = store.get(1)

    clock.now += 100
    store.get(2)

    assert len(store) == 2
    assert store.get(1) is first
