import sys
from pathlib import Path

# Ensure the flat modules import when running from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest


class FakeTimerHost:
    """Stands in for a Tk widget: records ``after`` calls, fires them on demand."""

    def __init__(self):
        self._next_id = 0
        self.pending = {}
        self.cancelled = []

    def after(self, ms, func):
        self._next_id += 1
        timer_id = f"after#{self._next_id}"
        self.pending[timer_id] = (ms, func)
        return timer_id

    def after_cancel(self, timer_id):
        self.cancelled.append(timer_id)
        self.pending.pop(timer_id, None)

    def fire_next(self):
        timer_id = next(iter(self.pending))
        _, func = self.pending.pop(timer_id)
        func()

    def fire_all(self, limit=100):
        fired = 0
        while self.pending and fired < limit:
            self.fire_next()
            fired += 1
        return fired


@pytest.fixture
def host():
    return FakeTimerHost()
