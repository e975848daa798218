"""Unit tests for the in-memory gamification store"""
import asyncio
import pytest

from fitquest.db.store import InMemoryGamificationStore, RecordTransaction


@pytest.mark.asyncio
async def test_get_missing_user(memory_store):
    """Test unknown users have no document"""
    assert await memory_store.get("nobody") is None


@pytest.mark.asyncio
async def test_create_if_absent_only_once(memory_store):
    """Test a second create leaves the first document alone"""
    assert await memory_store.create_if_absent("u1", {"xp": 0}) is True
    assert await memory_store.create_if_absent("u1", {"xp": 999}) is False

    assert await memory_store.get("u1") == {"xp": 0}


@pytest.mark.asyncio
async def test_get_returns_copy(memory_store):
    """Test callers can't mutate stored documents"""
    await memory_store.create_if_absent("u1", {"badges": {}})

    document = await memory_store.get("u1")
    document["badges"]["FIRST_MEAL"] = True

    assert await memory_store.get("u1") == {"badges": {}}


@pytest.mark.asyncio
async def test_transaction_saves_on_exit(memory_store):
    """Test pending document is written when the block exits"""
    await memory_store.create_if_absent("u1", {"xp": 0})

    async with memory_store.transaction("u1") as txn:
        assert isinstance(txn, RecordTransaction)
        assert txn.document == {"xp": 0}
        txn.save({"xp": 50})

    assert await memory_store.get("u1") == {"xp": 50}


@pytest.mark.asyncio
async def test_transaction_without_save(memory_store):
    """Test nothing is written if save() isn't called"""
    await memory_store.create_if_absent("u1", {"xp": 5})

    async with memory_store.transaction("u1"):
        pass

    assert await memory_store.get("u1") == {"xp": 5}


@pytest.mark.asyncio
async def test_transaction_discarded_on_error(memory_store):
    """Test an exception in the block discards the pending document"""
    await memory_store.create_if_absent("u1", {"xp": 5})

    with pytest.raises(RuntimeError):
        async with memory_store.transaction("u1") as txn:
            txn.save({"xp": 100})
            raise RuntimeError("step failed")

    assert await memory_store.get("u1") == {"xp": 5}


@pytest.mark.asyncio
async def test_transactions_serialized_per_user():
    """Test concurrent read-modify-write on one user loses no updates"""
    store = InMemoryGamificationStore()
    await store.create_if_absent("u1", {"count": 0})

    async def increment():
        async with store.transaction("u1") as txn:
            count = txn.document["count"]
            await asyncio.sleep(0)
            txn.save({"count": count + 1})

    await asyncio.gather(*(increment() for _ in range(20)))

    assert await store.get("u1") == {"count": 20}


@pytest.mark.asyncio
async def test_locks_released_after_use():
    """Test per-user locks don't accumulate once no task needs them"""
    store = InMemoryGamificationStore()

    for user_id in ("u1", "u2", "u3"):
        await store.create_if_absent(user_id, {"count": 0})
        async with store.transaction(user_id) as txn:
            txn.save({"count": 1})

    assert store._locks == {}
    assert store._lock_users == {}


@pytest.mark.asyncio
async def test_lock_kept_while_waiting():
    """Test a waiting transaction keeps the user's lock alive"""
    store = InMemoryGamificationStore()
    await store.create_if_absent("u1", {"count": 0})
    entered = asyncio.Event()
    release = asyncio.Event()

    async def holder():
        async with store.transaction("u1") as txn:
            entered.set()
            await release.wait()
            txn.save({"count": txn.document["count"] + 1})

    async def waiter():
        await entered.wait()
        async with store.transaction("u1") as txn:
            txn.save({"count": txn.document["count"] + 1})

    tasks = [asyncio.create_task(holder()), asyncio.create_task(waiter())]
    await entered.wait()
    await asyncio.sleep(0)
    assert store._lock_users["u1"] == 2

    release.set()
    await asyncio.gather(*tasks)

    assert await store.get("u1") == {"count": 2}
    assert store._locks == {}
