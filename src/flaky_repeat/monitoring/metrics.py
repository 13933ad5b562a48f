"""Prometheus metrics for repeated runs.

Useful alert signals:
- repetition_attempts_total{outcome="tolerable_failure"} (rising flakiness)
- repetition_runs_total{verdict="fatal"} (runs that could not be rescued)
"""

from prometheus_client import Counter

# === Attempt Metrics ===

attempts_total = Counter(
    "repetition_attempts_total",
    "Total attempts executed by outcome",
    ["outcome"],
)
"""
Attempts counter by outcome.

Labels:
- outcome: success, tolerable_failure, fatal
"""

# === Run Metrics ===

runs_total = Counter(
    "repetition_runs_total",
    "Total repeated runs by final verdict",
    ["verdict"],
)
"""
Runs counter by final verdict.

Labels:
- verdict: success, fatal
"""
