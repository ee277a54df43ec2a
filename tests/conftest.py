import pytest

from utils.rate_limit import RateLimiter
from utils.state import JsonFileStore, LinkRegistry, MenuTracker


class FakeClock:
    def __init__(self, start: int = 1_700_000_000):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds: int):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(tmp_path):
    return JsonFileStore(tmp_path / "rate_limits.json")


@pytest.fixture
def limiter(store, clock):
    return RateLimiter(store, clock=clock)


@pytest.fixture
def links():
    return LinkRegistry()


@pytest.fixture
def menus():
    return MenuTracker()
