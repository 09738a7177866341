# tests/test_monitoring.py
"""
Prometheus metrics.
"""
import pytest
from httpx import ASGITransport, AsyncClient

from specflow.lib.monitoring import record_phase_execution, registry
from specflow.main import create_app


class TestMonitoring:

    def test_phase_counter(self):
        labels = {"phase": "SPEC", "outcome": "failed"}
        before = registry.get_sample_value("specflow_phase_executions_total", labels) or 0

        record_phase_execution("SPEC", "failed")

        assert registry.get_sample_value("specflow_phase_executions_total", labels) == before + 1

    @pytest.mark.asyncio
    async def test_metrics_endpoint(self, artifacts_dir, fake_llm):
        app = create_app(rate_limit="1000/minute", artifacts_dir=artifacts_dir, llm_factory=fake_llm.factory)
        transport = ASGITransport(app=app, raise_app_exceptions=False)

        async with AsyncClient(transport=transport, base_url="http://test") as client:
            await client.get("/healthz")
            response = await client.get("/metrics")

        assert response.status_code == 200
        assert "specflow_phase_executions_total" in response.text

    def test_phase_duration_is_observed(self):
        before = registry.get_sample_value("specflow_phase_duration_seconds_count", {"phase": "DONE"}) or 0

        record_phase_execution("DONE", "succeeded", 3.5)

        assert registry.get_sample_value("specflow_phase_duration_seconds_count", {"phase": "DONE"}) == before + 1
