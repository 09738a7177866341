# specflow/lib/monitoring.py
from typing import Optional

from fastapi import FastAPI
from prometheus_client.registry import CollectorRegistry as Registry
from prometheus_client import Counter, Histogram
from prometheus_fastapi_instrumentator import Instrumentator
from specflow.core.logging import log

# Separate registry so app factories can be built repeatedly (tests)
registry = Registry()

phase_executions = Counter(
    'specflow_phase_executions_total',
    'Phase executions by phase and outcome',
    ['phase', 'outcome'],
    registry=registry
)

# A phase is a chain of LLM calls; buckets span seconds to several minutes
phase_duration = Histogram(
    'specflow_phase_duration_seconds',
    'Wall time of phase executions, LLM calls included',
    ['phase'],
    buckets=(5, 15, 30, 60, 120, 240, 480),
    registry=registry
)


def record_phase_execution(phase: str, outcome: str, duration: Optional[float] = None) -> None:
    """outcome is "succeeded" or "failed"."""
    phase_executions.labels(phase=phase, outcome=outcome).inc()
    if duration is not None:
        phase_duration.labels(phase=phase).observe(duration)


def register_monitoring(app: FastAPI):
    """Request metrics for every route plus the phase metrics above, at /metrics."""
    instrumentator = Instrumentator(
        excluded_handlers=["/metrics"],
        registry=registry
    ).instrument(app)

    instrumentator.expose(app, include_in_schema=False, should_gzip=True)

    log("MONITORING", "Prometheus instrumentation registered at /metrics.")
