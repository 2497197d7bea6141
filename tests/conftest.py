"""共通フィクスチャ."""

from datetime import datetime, timedelta, timezone

import pytest

from clickstats.memory import MemoryClickStore
from clickstats.store import set_store


class FakeClock:
    """呼ばれるたびに 1 秒進む時計."""

    def __init__(self):
        self.now = datetime(2026, 1, 14, 21, 56, 3, tzinfo=timezone.utc)

    def __call__(self):
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    """共有ストアとしても登録したメモリストア."""
    s = MemoryClickStore(clock=clock)
    set_store(s)
    yield s
    set_store(None)
