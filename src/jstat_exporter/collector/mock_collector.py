"""
Collector that reads from the mock jstat generator.
Used for local development on machines without a JVM to watch.
"""

from jstat_exporter.collector.jstat_collector import JstatCollector
from jstat_exporter.mock.generator import MockJstat


class MockCollector(JstatCollector):
    """A real JstatCollector wired to the mock generator instead of a subprocess."""

    def __init__(self, seed: int = 42):
        self.mock = MockJstat(seed=seed)
        # Sequential so a given seed always yields the same readings
        super().__init__(target="mock", runner=self.mock, parallel=False)

    def name(self) -> str:
        return "Mock jstat (512MB heap, parallel GC)"
