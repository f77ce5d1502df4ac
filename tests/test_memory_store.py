from __future__ import annotations

import threading
import time

from orderbot.domain.entities.conversation import Conversation, Step
from orderbot.infrastructure.store.memory_store import MemorySessionStore


def test_get_set_delete():
    store = MemorySessionStore()
    assert store.get("1") is None

    conversation = Conversation(user_id="1", chat_id="10")
    store.set("1", conversation)
    assert store.get("1") is conversation
    assert "1" in store
    assert len(store) == 1

    store.delete("1")
    assert store.get("1") is None
    store.delete("1")


def test_set_replaces_existing_conversation():
    store = MemorySessionStore()
    store.set("1", Conversation(user_id="1", chat_id="10", step=Step.SELECTING_DAY))
    store.set("1", Conversation(user_id="1", chat_id="10"))

    assert store.get("1").step == Step.AWAITING_NAME
    assert len(store) == 1


def test_purge_idle_removes_only_stale_conversations():
    store = MemorySessionStore()
    store.set("old", Conversation(user_id="old", chat_id="1", updated_at=100.0))
    store.set("fresh", Conversation(user_id="fresh", chat_id="2", updated_at=500.0))
    store.set("untracked", Conversation(user_id="untracked", chat_id="3"))

    removed = store.purge_idle(cutoff_ts=200.0)

    assert removed == ["old"]
    assert "old" not in store
    assert "fresh" in store
    assert "untracked" in store


def test_clear():
    store = MemorySessionStore()
    store.set("1", Conversation(user_id="1", chat_id="10"))
    store.clear()
    assert len(store) == 0


def test_lock_serializes_same_user():
    store = MemorySessionStore()
    inside: list[str] = []
    overlaps: list[bool] = []

    def worker(name: str) -> None:
        with store.lock("42"):
            overlaps.append(bool(inside))
            inside.append(name)
            time.sleep(0.05)
            inside.remove(name)

    threads = [threading.Thread(target=worker, args=(f"t{i}",)) for i in range(3)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert overlaps == [False, False, False]


def test_lock_does_not_block_other_users():
    store = MemorySessionStore()
    acquired = threading.Event()

    with store.lock("1"):
        t = threading.Thread(target=lambda: _acquire(store, "2", acquired))
        t.start()
        assert acquired.wait(timeout=2)
    t.join()


def _acquire(store: MemorySessionStore, user_id: str, acquired: threading.Event) -> None:
    with store.lock(user_id):
        acquired.set()


def test_locks_are_released_after_use():
    store = MemorySessionStore()
    for i in range(1000):
        with store.lock(str(i)):
            assert store.active_lock_count == 1
    assert store.active_lock_count == 0


def test_lock_entry_survives_while_another_thread_waits():
    store = MemorySessionStore()
    order: list[str] = []
    waiting = threading.Event()

    def second() -> None:
        waiting.set()
        with store.lock("42"):
            order.append("second")

    with store.lock("42"):
        t = threading.Thread(target=second)
        t.start()
        waiting.wait(timeout=2)
        time.sleep(0.05)
        order.append("first")
    t.join()

    assert order == ["first", "second"]
    assert store.active_lock_count == 0


def test_lock_is_released_when_body_raises():
    store = MemorySessionStore()
    try:
        with store.lock("42"):
            raise RuntimeError("handler failed")
    except RuntimeError:
        pass
    assert store.active_lock_count == 0


def test_purge_idle_skips_users_being_handled():
    store = MemorySessionStore()
    store.set("busy", Conversation(user_id="busy", chat_id="1", updated_at=100.0))
    store.set("idle", Conversation(user_id="idle", chat_id="2", updated_at=100.0))

    with store.lock("busy"):
        removed = store.purge_idle(cutoff_ts=200.0)

    assert removed == ["idle"]
    assert "busy" in store
    assert store.purge_idle(cutoff_ts=200.0) == ["busy"]
