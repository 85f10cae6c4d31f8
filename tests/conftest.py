import pytest

from chronoid.services.cache import Cache
from chronoid.utils.snowflake import Snowflake


class FakeClock:
    """A millisecond clock that only moves when told to."""

    def __init__(self, now: float = 1_700_000_000_000):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock, monkeypatch):
    cache = Cache(ttl=10_000)
    monkeypatch.setattr(cache, "_current_timestamp", clock)
    yield cache
    cache.close()


@pytest.fixture
def snowflake():
    return Snowflake(0)
