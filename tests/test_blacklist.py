import threading
import time

from marketplace.auth.blacklist import TokenBlacklist

from .conftest import FakeClock


def test_revoked_token_is_present_until_expiry(clock: FakeClock):
    store = TokenBlacklist(clock=clock)
    store.add("tok", ttl_ms=1_000)

    assert store.has("tok")
    clock.advance(0.999)
    assert store.has("tok")
    clock.advance(0.002)
    assert not store.has("tok")


def test_expired_entry_never_flips_back(clock: FakeClock):
    store = TokenBlacklist(clock=clock)
    store.add("tok", ttl_ms=10)
    clock.advance(1)

    assert [store.has("tok") for _ in range(3)] == [False, False, False]
    assert len(store) == 0


def test_unknown_token_is_absent():
    assert not TokenBlacklist().has("never-added")


def test_add_overwrites_expiry(clock: FakeClock):
    store = TokenBlacklist(clock=clock)
    store.add("tok", ttl_ms=10)
    store.add("tok", ttl_ms=60_000)
    clock.advance(1)

    assert store.has("tok")


def test_add_sweeps_only_expired_entries(clock: FakeClock):
    store = TokenBlacklist(clock=clock)
    store.add("short", ttl_ms=100)
    store.add("long", ttl_ms=10_000)
    clock.advance(1)

    store.add("new", ttl_ms=100)

    assert len(store) == 2
    assert store.has("long")
    assert store.has("new")


def test_real_clock_expiry():
    store = TokenBlacklist()
    store.add("tok", ttl_ms=20)
    assert store.has("tok")
    time.sleep(0.05)
    assert not store.has("tok")


def test_concurrent_revocations_are_immediately_visible():
    store = TokenBlacklist()
    failures = []

    def worker(n: int):
        for i in range(200):
            token = f"t{n}-{i}"
            store.add(token, ttl_ms=60_000)
            if not store.has(token):
                failures.append(token)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert failures == []
    assert len(store) == 8 * 200
