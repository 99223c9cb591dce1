"""jstat_exporter - JVM GC and heap statistics for Prometheus."""

__version__ = "0.3.0"
