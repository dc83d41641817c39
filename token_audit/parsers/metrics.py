"""Audit pipeline metrics: run counts, latency and degraded checks.

Counters accumulate during runtime and are read by the health endpoint.
The heuristic engine never reads them.
"""

import time
from collections import Counter
from threading import Lock


class AuditMetrics:
    """Process-wide accumulator, guarded by a simple lock."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._start_time: float = time.monotonic()
        self._total_runs: int = 0
        self._total_latency_ms: float = 0.0
        self._max_latency_ms: float = 0.0
        self._failures: Counter[str] = Counter()
        self._unknown_reasons: Counter[str] = Counter()

    def record_run(self, latency_ms: float, unknown_reasons: list[str]) -> None:
        """Record a completed audit and the reasons of its UNKNOWN checks."""
        with self._lock:
            self._total_runs += 1
            self._total_latency_ms += latency_ms
            if latency_ms > self._max_latency_ms:
                self._max_latency_ms = latency_ms
            self._unknown_reasons.update(unknown_reasons)

    def record_failure(self, error_type: str) -> None:
        with self._lock:
            self._failures[error_type] += 1

    def get_summary(self) -> dict:
        """Return a snapshot of all metrics."""
        with self._lock:
            uptime = time.monotonic() - self._start_time
            avg = self._total_latency_ms / self._total_runs if self._total_runs else 0.0
            return {
                "uptime_sec": round(uptime),
                "total_audits": self._total_runs,
                "avg_latency_ms": round(avg),
                "max_latency_ms": round(self._max_latency_ms),
                "failures": dict(self._failures),
                "unknown_checks": dict(self._unknown_reasons),
            }


# Global singleton, imported by the auditor and the health endpoint
metrics = AuditMetrics()
