"""
Shared fixtures for process status tests.

Provides:
- FakeRedis: in-memory stand-in for the redis.asyncio calls StatusStore makes,
  with a manually advanced clock for expiry
- StepClock: deterministic timestamps, one second apart per call
- store / tracker / hooks wired together over FakeRedis
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from process_status.store.redis_store import StatusStore
from process_status.tracking.hooks import StatusHooks
from process_status.tracking.tracker import LifecycleTracker


class FakeRedis:
    def __init__(self) -> None:
        self.now = 0.0
        self.data: dict[str, tuple[str, float]] = {}
        self.down = False
        self.closed = False

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def seed(self, key: str, value: str, ttl: int = 3600) -> None:
        self.data[key] = (value, self.now + ttl)

    def ttl(self, key: str) -> float | None:
        entry = self.data.get(key)
        if entry is None:
            return None
        return entry[1] - self.now

    def _check(self) -> None:
        if self.down:
            raise RedisConnectionError("Connection refused")

    async def get(self, key: str) -> str | None:
        self._check()
        entry = self.data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self.now >= expires_at:
            del self.data[key]
            return None
        return value

    async def setex(self, key: str, seconds: int, value: str) -> bool:
        self._check()
        self.data[key] = (value, self.now + seconds)
        return True

    async def ping(self) -> bool:
        self._check()
        return True

    async def aclose(self) -> None:
        self.closed = True


class StepClock:
    def __init__(self, start: datetime | None = None, step: float = 1.0) -> None:
        self.current = start or datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        self.step = timedelta(seconds=step)

    def __call__(self) -> datetime:
        value = self.current
        self.current += self.step
        return value


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def store(fake_redis: FakeRedis) -> StatusStore:
    return StatusStore(fake_redis, namespace="test", ttl_seconds=24 * 3600)


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def tracker(store: StatusStore, clock: StepClock) -> LifecycleTracker:
    return LifecycleTracker(store, clock=clock)


@pytest.fixture
def hooks(tracker: LifecycleTracker) -> StatusHooks:
    return StatusHooks(tracker, identity_field="PROCESS_ID")


@pytest.fixture
def sample_vars() -> dict[str, Any]:
    return {"PROCESS_ID": "proc-1", "bucket": "exports", "rows": 120}
