"""Captured jstat output (JDK 8, parallel GC) and a stub runner for tests."""

from jstat_exporter.metrics import ReportType

GCCAPACITY_OUTPUT = """\
 NGCMN    NGCMX     NGC     S0C   S1C       EC      OGCMN      OGCMX       OGC         OC       MCMN     MCMX      MC     CCSMN    CCSMX     CCSC    YGC    FGC
 10240.0 174720.0  54272.0 5120.0 5120.0  44032.0    20480.0   349568.0    87552.0    87552.0      0.0 1079296.0  30464.0      0.0 1048576.0   3328.0     15     2
"""

GCOLD_OUTPUT = """\
   MC       MU      CCSC     CCSU       OC          OU       YGC    FGC    FGCT     GCT
 30464.0  28750.1   3328.0   2981.5     87552.0     23815.4     15     2    0.245    0.368
"""

GCNEW_OUTPUT = """\
 S0C    S1C    S0U    S1U   TT MTT  DSS      EC       EU     YGC     YGCT
5120.0 5120.0    0.0 1984.3 15  15 2560.0  44032.0  12040.7     15    0.123
"""

GC_HEADER = (
    " S0C    S1C    S0U    S1U      EC       EU        OC         OU       MC     MU    "
    "CCSC   CCSU   YGC     YGCT    FGC    FGCT     GCT"
)


def gc_output(ygc=15, fgc=2, ygct=0.123, fgct=0.245):
    gct = ygct + fgct
    row = (
        f"5120.0 5120.0  0.0   1984.3 44032.0  12040.7   87552.0    23815.4   30464.0 28750.1 "
        f"3328.0 2981.5 {ygc:6d} {ygct:8.3f} {fgc:6d} {fgct:7.3f} {gct:8.3f}"
    )
    return f"{GC_HEADER}\n{row}\n"


# JDK 11+ adds the concurrent GC columns CGC/CGCT in front of GCT
GC_OUTPUT_JDK11 = """\
 S0C    S1C    S0U    S1U      EC       EU        OC         OU       MC     MU    CCSC   CCSU   YGC     YGCT    FGC    FGCT     CGC    CGCT     GCT
5120.0 5120.0  0.0   1984.3 44032.0  12040.7   87552.0    23815.4   30464.0 28750.1 3328.0 2981.5     15    0.123     2    0.245     4    0.010    0.378
"""


class StubRunner:
    """Deterministic runner: fixed text per report, GC counts settable per call."""

    def __init__(self, ygc=15, fgc=2):
        self.ygc = ygc
        self.fgc = fgc
        self.calls = []
        self.outputs = {
            ReportType.CAPACITY: GCCAPACITY_OUTPUT,
            ReportType.OLD: GCOLD_OUTPUT,
            ReportType.NEW: GCNEW_OUTPUT,
        }

    def __call__(self, report, target):
        self.calls.append((report, target))
        if report in self.outputs:
            return self.outputs[report]
        return gc_output(ygc=self.ygc, fgc=self.fgc)


class SequenceRunner(StubRunner):
    """Returns young GC counts from a list, one per -gc call."""

    def __init__(self, ygc_values, fgc=0):
        super().__init__(fgc=fgc)
        self._ygc_values = list(ygc_values)

    def __call__(self, report, target):
        if report == ReportType.GC:
            self.ygc = self._ygc_values.pop(0)
        return super().__call__(report, target)
