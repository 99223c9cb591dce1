"""
Mock jstat output generator.

Produces fake but realistic jstat text so we can develop and test without
a JVM. Numbers are loosely based on a 512MB heap running the default
parallel collector on JDK 8, with a young GC every few ticks and an
occasional full GC.
"""

import math
import random

from jstat_exporter.metrics import ReportType

_HEADERS = {
    ReportType.CAPACITY: "NGCMN NGCMX NGC S0C S1C EC OGCMN OGCMX OGC OC MCMN MCMX MC CCSMN CCSMX CCSC YGC FGC",
    ReportType.OLD: "MC MU CCSC CCSU OC OU YGC FGC FGCT GCT",
    ReportType.NEW: "S0C S1C S0U S1U TT MTT DSS EC EU YGC YGCT",
    ReportType.GC: "S0C S1C S0U S1U EC EU OC OU MC MU CCSC CCSU YGC YGCT FGC FGCT GCT",
}

_FIRST_REPORT = next(iter(ReportType))


def format_table(header: str, values: list) -> str:
    """Render a header and one data row the way jstat aligns them."""
    names = header.split()
    cells = [f"{v:.1f}" if isinstance(v, float) else str(v) for v in values]
    widths = [max(len(n), len(c)) + 2 for n, c in zip(names, cells)]
    head = "".join(n.rjust(w) for n, w in zip(names, widths))
    row = "".join(c.rjust(w) for c, w in zip(cells, widths))
    return f"{head}\n{row}\n"


class MockJstat:
    """Callable stand-in for JstatRunner. Each `-gccapacity` call advances the clock."""

    def __init__(self, seed: int = 42):
        self._rng = random.Random(seed)
        self._tick = 0
        self.new_max = 174720.0
        self.old_max = 349568.0
        self.meta_max = 1079296.0
        self.restart()

    def restart(self):
        """Simulate the target JVM restarting: GC counts and times start over."""
        self._ygc = 0
        self._fgc = 0
        self._ygct = 0.0
        self._fgct = 0.0
        self._eden_used = 0.0
        self._old_used = 2048.0
        self._meta_used = 8000.0

    def _advance(self):
        self._tick += 1
        eden_cap = 43520.0

        # Eden fills up with a sinusoidal allocation rate; a young GC empties it
        self._eden_used += 9000 + 4000 * math.sin(self._tick * 0.3) + self._rng.gauss(0, 500)
        if self._eden_used >= eden_cap:
            self._ygc += 1
            self._ygct += max(0.001, self._rng.gauss(0.008, 0.002))
            self._old_used += self._rng.uniform(200, 1200)
            self._eden_used = self._rng.uniform(0, 2000)

        # Old gen fills slowly; a full GC compacts it back down
        if self._old_used > 0.8 * 87552.0:
            self._fgc += 1
            self._fgct += max(0.01, self._rng.gauss(0.12, 0.03))
            self._old_used = self._rng.uniform(3000, 6000)

        self._meta_used = min(self._meta_used + self._rng.uniform(0, 20), 28000.0)

    def output(self, report: ReportType) -> str:
        eden_cap, s_cap, old_cap, meta_cap, ccs_cap = 43520.0, 5120.0, 87552.0, 30464.0, 3328.0
        s0u = 0.0 if self._ygc % 2 else round(self._rng.uniform(300, 1500), 1)
        s1u = round(self._rng.uniform(300, 1500), 1) if self._ygc % 2 else 0.0
        ccsu = round(self._meta_used * 0.1, 1)
        gct = self._ygct + self._fgct
        new_cap = eden_cap + 2 * s_cap

        if report == ReportType.CAPACITY:
            values = [
                new_cap, self.new_max, new_cap, s_cap, s_cap, eden_cap,
                old_cap, self.old_max, old_cap, old_cap,
                0.0, self.meta_max, meta_cap, 0.0, 1048576.0, ccs_cap,
                self._ygc, self._fgc,
            ]
        elif report == ReportType.OLD:
            values = [
                meta_cap, round(self._meta_used, 1), ccs_cap, ccsu,
                old_cap, round(self._old_used, 1),
                self._ygc, self._fgc, f"{self._fgct:.3f}", f"{gct:.3f}",
            ]
        elif report == ReportType.NEW:
            values = [
                s_cap, s_cap, s0u, s1u, 15, 15, 2560.0,
                eden_cap, round(self._eden_used, 1), self._ygc, f"{self._ygct:.3f}",
            ]
        else:
            values = [
                s_cap, s_cap, s0u, s1u, eden_cap, round(self._eden_used, 1),
                old_cap, round(self._old_used, 1), meta_cap, round(self._meta_used, 1),
                ccs_cap, ccsu, self._ygc, f"{self._ygct:.3f}",
                self._fgc, f"{self._fgct:.3f}", f"{gct:.3f}",
            ]

        return format_table(_HEADERS[report], values)

    def __call__(self, report: ReportType, target: str) -> str:
        # A scrape asks for every report in ReportType order; all four see one tick
        if report == _FIRST_REPORT:
            self._advance()
        return self.output(report)
