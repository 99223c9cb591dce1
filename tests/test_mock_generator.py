"""Basic sanity checks for the mock jstat generator."""

from jstat_exporter.collector.jstat_parser import parse_jstat_output
from jstat_exporter.collector.mock_collector import MockCollector
from jstat_exporter.metrics import ReportType
from jstat_exporter.mock.generator import MockJstat


def test_every_report_parses():
    mock = MockJstat(seed=42)
    for report in ReportType:
        table = parse_jstat_output(mock(report, "mock"), report=report.flag)
        assert len(table.columns) == len(table.values)


def test_snapshot_returns_valid_data():
    collector = MockCollector(seed=42)
    snap = collector.collect()

    assert snap.gauges["edenUsed"] <= snap.gauges["edenCap"]
    assert snap.gauges["oldUsed"] <= snap.gauges["oldCap"]
    assert snap.gauges["newCommit"] <= snap.gauges["newMax"]
    assert snap.gauges["gcSec"] >= snap.gauges["ygcSec"]


def test_gc_counts_never_decrease():
    collector = MockCollector(seed=7)
    totals = [collector.collect().counters["ygcTimes"] for _ in range(30)]
    assert totals == sorted(totals)
    assert totals[-1] > 0


def test_restart_is_detected():
    collector = MockCollector(seed=42)
    for _ in range(20):
        before = collector.collect()
    assert before.counters["ygcTimes"] > 0

    collector.mock.restart()
    after = collector.collect()

    assert after.counters["ygcTimes"] >= before.counters["ygcTimes"]
    assert "ygcTimes" in after.resets


def test_deterministic_with_same_seed():
    a = MockCollector(seed=99).collect()
    b = MockCollector(seed=99).collect()
    assert a.gauges == b.gauges
    assert a.counters == b.counters


def test_summary_dict_has_expected_keys():
    summary = MockCollector(seed=42).collect().summary()
    for key in ("timestamp", "oldUsed", "edenUsed", "ygcTimes", "fgcTimes", "gcSec", "duration_ms"):
        assert key in summary, f"Missing key: {key}"


def test_reports_in_one_cycle_describe_the_same_moment():
    mock = MockJstat(seed=3)
    for _ in range(10):
        tables = {r: parse_jstat_output(mock(r, "mock"), report=r.flag).by_name for r in ReportType}
        assert tables[ReportType.NEW]["EU"] == tables[ReportType.GC]["EU"]
        assert tables[ReportType.NEW]["YGC"] == tables[ReportType.GC]["YGC"]
        assert tables[ReportType.OLD]["OU"] == tables[ReportType.GC]["OU"]
