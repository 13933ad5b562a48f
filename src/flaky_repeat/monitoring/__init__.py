"""Monitoring: Prometheus counters for attempts and runs."""

from flaky_repeat.monitoring.metrics import attempts_total, runs_total

__all__ = ["attempts_total", "runs_total"]
