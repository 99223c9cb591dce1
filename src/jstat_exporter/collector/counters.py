"""
Turns jstat's cumulative GC counts into exported counters that never go down.

jstat reports totals since the JVM started. We export our own running
total, advanced by the difference between consecutive readings. When a
reading is lower than the previous one the target JVM restarted; the new
reading is then the number of events since that restart, so it is added
as-is instead of subtracting the drop.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Tuple

log = logging.getLogger(__name__)


@dataclass
class CounterState:
    last_observed: float = 0.0
    total: float = 0.0
    resets: int = 0

    def advance(self, observed: float) -> Tuple[float, bool]:
        """Fold one reading in. Returns (amount added, whether a restart was seen)."""
        delta = observed - self.last_observed
        restarted = delta < 0
        if restarted:
            delta = observed
            self.resets += 1

        self.total += delta
        self.last_observed = observed
        return delta, restarted


class CounterBook:
    """Counter state for every counter metric of one sampler."""

    def __init__(self, names: Iterable[str] = ()):
        self._states: Dict[str, CounterState] = {name: CounterState() for name in names}

    def state(self, name: str) -> CounterState:
        if name not in self._states:
            self._states[name] = CounterState()
        return self._states[name]

    def observe(self, name: str, observed: float) -> bool:
        """Record a reading for `name`. Returns True if it looked like a restart."""
        state = self.state(name)
        previous = state.last_observed
        _, restarted = state.advance(observed)
        if restarted:
            log.warning(
                "Counter %s went backwards (%s -> %s), target JVM probably restarted",
                name, previous, observed,
            )
        return restarted

    def totals(self) -> Dict[str, float]:
        return {name: s.total for name, s in self._states.items()}

    def reset_counts(self) -> Dict[str, int]:
        return {name: s.resets for name, s in self._states.items()}
