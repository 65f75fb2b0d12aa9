"""Testing fakes – in-memory doubles for kernel and observability ports."""
from doc_optimizer.testing.fakes.clock import FakeClock
from doc_optimizer.testing.fakes.metrics import FakeMetricsRegistry
from doc_optimizer.testing.fakes.sleep import FakeSleep
from doc_optimizer.kernel.time import FrozenClock

__all__ = ["FakeClock", "FakeMetricsRegistry", "FakeSleep", "FrozenClock"]
