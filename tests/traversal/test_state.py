"""Tests for traversal state and the state pool.

Why these tests exist:
- A pooled state that keeps stale identities would make later copies treat
  fresh nodes as cycles and silently drop data
- The pool must hand every concurrent call its own state
"""

import threading

import pytest

from deepclone import StateCorruptionError, StatePool, TraversalState


def test_new_state_is_clear() -> None:
    state = TraversalState()
    assert state.depth == 0
    assert state.is_clear()


def test_enter_detects_repeats() -> None:
    state = TraversalState()

    assert state.enter(1)
    assert not state.enter(1)

    state.leave(1)
    assert state.enter(1)


def test_reset_drops_bookkeeping() -> None:
    state = TraversalState()
    state.depth = 3
    state.enter("key")

    state.reset()

    assert state.is_clear()


def test_acquire_reuses_released_state() -> None:
    pool = StatePool(max_size=2)

    with pool.acquire() as first:
        pass
    with pool.acquire() as second:
        pass

    assert first is second
    assert len(pool) == 1


def test_acquire_releases_on_error() -> None:
    pool = StatePool(max_size=2)

    with pytest.raises(ValueError), pool.acquire():
        raise ValueError("boom")

    assert len(pool) == 1


def test_checkout_of_dirty_state_fails_loudly() -> None:
    """CRITICAL: Reusing uncleared bookkeeping must never be tolerated."""
    pool = StatePool(max_size=2)
    state = pool.checkout()
    pool.release(state)

    # Corrupt the pooled state behind the pool's back
    state.seen.add(12345)

    with pytest.raises(StateCorruptionError, match="not clear"):
        pool.checkout()


def test_release_of_dirty_state_fails_loudly() -> None:
    """CRITICAL: Leftover bookkeeping is raised, never pooled or ignored."""
    pool = StatePool(max_size=2)
    state = pool.checkout()
    state.depth = 1

    with pytest.raises(StateCorruptionError, match="Released traversal state is not clear"):
        pool.release(state)

    assert len(pool) == 0


def test_acquire_raises_when_block_leaves_state_dirty() -> None:
    pool = StatePool(max_size=2)

    with pytest.raises(StateCorruptionError), pool.acquire() as state:
        state.enter("leaked")

    assert len(pool) == 0


def test_dirty_state_error_chains_to_the_failure_in_flight() -> None:
    pool = StatePool(max_size=2)

    with pytest.raises(StateCorruptionError) as excinfo, pool.acquire() as state:
        state.depth = 2
        raise ValueError("boom")

    assert isinstance(excinfo.value.__cause__, ValueError)
    assert len(pool) == 0


def test_pool_size_is_bounded() -> None:
    pool = StatePool(max_size=1)
    states = [pool.checkout() for _ in range(3)]
    for state in states:
        pool.release(state)

    assert len(pool) == 1


def test_zero_size_disables_pooling() -> None:
    pool = StatePool(max_size=0)
    with pool.acquire() as first:
        pass
    with pool.acquire() as second:
        pass

    assert first is not second


def test_concurrent_checkouts_get_distinct_states() -> None:
    pool = StatePool(max_size=8)
    barrier = threading.Barrier(8)
    held: list[TraversalState] = []
    lock = threading.Lock()

    def worker() -> None:
        with pool.acquire() as state:
            with lock:
                held.append(state)
            barrier.wait()

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len({id(state) for state in held}) == 8
    assert len(pool) == 8
