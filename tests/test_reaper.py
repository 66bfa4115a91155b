"""Tests for the background context reaper"""
import asyncio
import logging
from datetime import timedelta
from unittest.mock import Mock

import pytest

from experience.cart import ContextReaper


def test_run_once_evicts_expired(store, clock, caplog):
    """A single sweep evicts expired contexts and logs the count"""
    expired = [store.create_context().cart_id for _ in range(2)]
    clock.advance(minutes=10)
    live = store.create_context().cart_id
    clock.advance(minutes=6)

    reaper = ContextReaper(store)
    with caplog.at_level(logging.INFO, logger="experience.cart.reaper"):
        evicted = reaper.run_once()

    assert evicted == 2
    assert all(cart_id not in store for cart_id in expired)
    assert live in store
    assert "Cleaned up 2 expired cart contexts" in caplog.text


def test_run_once_on_empty_store(store):
    assert ContextReaper(store).run_once() == 0


def test_default_interval_is_independent_of_ttl(store):
    assert ContextReaper(store).interval == timedelta(minutes=40)
    assert store.ttl == timedelta(minutes=15)


@pytest.mark.asyncio
async def test_start_and_stop(store, clock):
    """Loop sweeps on its interval until stopped"""
    store.create_context()
    clock.advance(minutes=16)
    reaper = ContextReaper(store, interval=timedelta(milliseconds=10))

    reaper.start()
    assert reaper.running
    await asyncio.sleep(0.1)
    await reaper.stop()

    assert len(store) == 0
    assert not reaper.running
    assert reaper.task is None


@pytest.mark.asyncio
async def test_start_twice_keeps_single_task(store, caplog):
    reaper = ContextReaper(store, interval=timedelta(minutes=40))

    reaper.start()
    task = reaper.task
    with caplog.at_level(logging.WARNING, logger="experience.cart.reaper"):
        reaper.start()

    assert reaper.task is task
    assert "already running" in caplog.text
    await reaper.stop()


@pytest.mark.asyncio
async def test_stop_without_start(store):
    reaper = ContextReaper(store)

    await reaper.stop()

    assert not reaper.running


@pytest.mark.asyncio
async def test_failed_sweep_does_not_stop_loop():
    """An exception in one sweep is logged and the loop keeps going"""
    calls = []

    def sweep():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("boom")
        return 0

    store = Mock()
    store.sweep_expired.side_effect = sweep
    reaper = ContextReaper(store, interval=timedelta(milliseconds=5))

    reaper.start()
    await asyncio.sleep(0.1)
    await reaper.stop()

    assert len(calls) >= 2
