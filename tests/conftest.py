import os
import tempfile
from collections import deque

import pytest

os.environ.setdefault("FLAKEID_LOG_DIR", tempfile.mkdtemp(prefix="flakeid-logs-"))

from flakeid.utils.snowflake import EPOCH  # noqa: E402

# 2024-01-01 00:00:00 UTC
START = 1704067200000


class FakeClock:
    """Settable millisecond clock; queued values are returned before `now`."""

    def __init__(self, now=START):
        self.now = now
        self.queue = deque()
        self.reads = 0

    def script(self, *values):
        self.queue.extend(values)

    def __call__(self):
        self.reads += 1
        if self.queue:
            return self.queue.popleft()
        return self.now


@pytest.fixture
def clock():
    assert START > EPOCH
    return FakeClock()
