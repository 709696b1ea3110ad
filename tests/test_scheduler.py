"""
Tests for RefreshScheduler using a scripted fetcher instead of the network.
"""

import re
import threading
import time

import pytest

from tracker.api import FetchError, FetchResult
from tracker.models import PriceUpdate
from tracker.services import PriceStore, RefreshScheduler


class ScriptedFetcher:
    """Returns queued results in order, then repeats the last one."""
    def __init__(self, *results):
        self.results = list(results)
        self.calls = []
        self.called = threading.Event()

    def fetch(self, ids):
        self.calls.append(list(ids))
        self.called.set()
        if len(self.results) > 1:
            return self.results.pop(0)
        return self.results[0]


class RaisingFetcher:
    def __init__(self):
        self.calls = 0

    def fetch(self, ids):
        self.calls += 1
        raise RuntimeError("boom")


def ok(**prices):
    return FetchResult.success({coin_id: PriceUpdate(*values) for coin_id, values in prices.items()})


def failed(status_code=503):
    return FetchResult.failure(FetchError("unexpected status", status_code=status_code))


@pytest.fixture
def store(small_catalog):
    return PriceStore(small_catalog, autosave=False)


def test_refresh_now_applies_updates_and_sets_connected(store):
    fetcher = ScriptedFetcher(ok(bitcoin=(50000, 2.5)))
    scheduler = RefreshScheduler(store, fetcher, interval=30)

    assert scheduler.refresh_now() is True

    assert fetcher.calls == [["bitcoin", "ethereum", "solana"]]
    btc = store.get_coin("bitcoin")
    assert (btc.price, btc.change_24h) == (50000, 2.5)
    connectivity = store.get_connectivity()
    assert connectivity.connected is True
    assert re.fullmatch(r"\d{2}:\d{2}:\d{2}", connectivity.last_update)


def test_failed_cycle_keeps_prices_then_success_recovers(store):
    fetcher = ScriptedFetcher(
        ok(bitcoin=(100, 1), ethereum=(10, -1)),
        failed(),
        ok(ethereum=(11, 0.5)),
    )
    scheduler = RefreshScheduler(store, fetcher, interval=30)

    scheduler.refresh_now()
    before = store.get_all_snapshot()
    last_update = store.get_connectivity().last_update

    assert scheduler.refresh_now() is False
    assert store.get_all_snapshot() == before
    connectivity = store.get_connectivity()
    assert connectivity.connected is False
    assert connectivity.last_update == last_update
    assert scheduler.consecutive_failures == 1

    assert scheduler.refresh_now() is True
    assert store.get_connectivity().connected is True
    assert store.get_coin("ethereum").price == 11
    assert store.get_coin("bitcoin").price == 100
    assert scheduler.consecutive_failures == 0
    assert scheduler.cycle_count == 3


def test_fetcher_exception_is_contained(store):
    scheduler = RefreshScheduler(store, RaisingFetcher(), interval=30)

    assert scheduler.refresh_now() is False
    assert store.get_connectivity().connected is False


def test_start_runs_immediate_cycle(store):
    fetcher = ScriptedFetcher(ok(solana=(150, 3)))
    scheduler = RefreshScheduler(store, fetcher, interval=30)

    scheduler.start()
    try:
        assert fetcher.called.wait(2.0)
        deadline = time.monotonic() + 2.0
        while scheduler.cycle_count < 1 and time.monotonic() < deadline:
            time.sleep(0.01)
        assert store.get_coin("solana").price == 150
    finally:
        assert scheduler.stop(timeout=2.0)


def test_stop_during_interval_wait_is_prompt(store):
    fetcher = ScriptedFetcher(ok(bitcoin=(1, 1)))
    scheduler = RefreshScheduler(store, fetcher, interval=30)
    scheduler.start()
    assert fetcher.called.wait(2.0)
    time.sleep(0.05)

    started = time.monotonic()
    assert scheduler.stop() is True
    assert time.monotonic() - started < 1.0
    assert not scheduler.is_running


def test_loop_survives_repeated_failures(store):
    fetcher = ScriptedFetcher(failed())
    scheduler = RefreshScheduler(store, fetcher, interval=0.01)

    with scheduler:
        deadline = time.monotonic() + 2.0
        while scheduler.cycle_count < 5 and time.monotonic() < deadline:
            time.sleep(0.01)
        assert scheduler.is_running

    assert scheduler.consecutive_failures >= 5
    assert store.get_connectivity().connected is False


def test_trigger_refresh_wakes_loop(store):
    fetcher = ScriptedFetcher(ok(bitcoin=(1, 1)), ok(bitcoin=(2, 2)))
    scheduler = RefreshScheduler(store, fetcher, interval=30)

    with scheduler:
        deadline = time.monotonic() + 2.0
        while scheduler.cycle_count < 1 and time.monotonic() < deadline:
            time.sleep(0.01)
        scheduler.trigger_refresh()
        while scheduler.cycle_count < 2 and time.monotonic() < deadline:
            time.sleep(0.01)

    assert store.get_coin("bitcoin").price == 2


def test_start_twice_is_a_noop(store):
    scheduler = RefreshScheduler(store, ScriptedFetcher(ok()), interval=30)
    scheduler.start()
    try:
        first_thread = scheduler._thread
        scheduler.start()
        assert scheduler._thread is first_thread
    finally:
        scheduler.stop(timeout=2.0)


def test_interval_must_be_positive(store):
    with pytest.raises(ValueError):
        RefreshScheduler(store, ScriptedFetcher(ok()), interval=0)
