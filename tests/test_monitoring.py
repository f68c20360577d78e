import asyncio

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from fittrack.core.enums import ComponentStatus, DiagnosticCategory
from fittrack.core.errors import ErrorCategory, Severity, classify_error
from fittrack.services.diagnostics import Diagnostic, expect, run_diagnostic
from fittrack.services.integration import IntegrationManager
from fittrack.services.performance import PerformanceMonitor, percentile


def test_percentile():
    assert percentile([], 95) == 0
    assert percentile([40, 10, 30, 20], 95) == 40
    assert percentile([40, 10, 30, 20], 50) == 20


def test_request_levels():
    monitor = PerformanceMonitor(budget_ms=1000)
    assert monitor.classify(500) == "ok"
    assert monitor.classify(800) == "warning"
    assert monitor.classify(1000) == "critical"


def test_performance_report():
    monitor = PerformanceMonitor(budget_ms=1000, sample_size=3)
    monitor.record_request("GET", "/a", 200, 100)
    monitor.record_request("GET", "/a", 200, 900)
    monitor.record_request("POST", "/b", 500, 1500)
    monitor.record_request("POST", "/b", 201, 50)
    monitor.record_metric("sync_batch_size", 4)
    monitor.record_metric("sync_batch_size", 6)

    report = monitor.get_report()
    # Oldest sample fell out of the window
    assert report["count"] == 3
    assert report["endpoints"]["GET /a"]["count"] == 1
    assert report["endpoints"]["POST /b"]["errors"] == 1
    assert report["error_rate"] == pytest.approx(33.33)
    assert (report["warnings"], report["critical"]) == (1, 1)
    assert [s["duration_ms"] for s in report["slow_requests"]] == [1500, 900]
    assert report["metrics"]["sync_batch_size"] == {"count": 2, "latest": 6, "average": 5}

    monitor.reset()
    assert monitor.get_report()["count"] == 0


async def test_event_bus_isolates_failing_handlers():
    bus = IntegrationManager()
    seen = []

    def broken(payload):
        raise RuntimeError("boom")

    async def listener(payload):
        seen.append(payload["n"])

    bus.on("data.changed", broken)
    bus.on("data.changed", listener)
    bus.on("data.changed", listener)

    assert await bus.emit("data.changed", {"n": 1}) == 1
    assert seen == [1]
    assert bus.handler_errors == 1

    bus.off("data.changed", broken)
    await bus.emit("data.changed", {"n": 2})
    status = bus.get_integration_status()
    assert status["events"] == {"data.changed": 2}
    assert status["listeners"] == {"data.changed": 1}
    assert status["overall"] == "unknown"


def test_overall_status_is_the_worst():
    bus = IntegrationManager()
    for name in bus.components:
        bus.components[name]["status"] = ComponentStatus.HEALTHY
    assert bus.overall_status() == ComponentStatus.HEALTHY
    bus.components["performance"]["status"] = ComponentStatus.DEGRADED
    assert bus.overall_status() == ComponentStatus.DEGRADED
    bus.components["cache"]["status"] = ComponentStatus.UNHEALTHY
    assert bus.overall_status() == ComponentStatus.UNHEALTHY


async def test_diagnostic_retries_then_fails():
    calls = []

    async def flaky(db):
        calls.append(1)
        expect(len(calls) >= 2, "not yet")

    result = await run_diagnostic(Diagnostic("flaky", DiagnosticCategory.UNIT, flaky), None, retry_delay=0)
    assert result["status"] == "passed"
    assert result["attempts"] == 2

    async def broken(db):
        expect(False, "always wrong")

    result = await run_diagnostic(Diagnostic("broken", DiagnosticCategory.UNIT, broken), None, retry_delay=0)
    assert (result["status"], result["attempts"], result["error"]) == ("failed", 3, "always wrong")


async def test_diagnostic_timeout():
    async def slow(db):
        await asyncio.sleep(1)

    result = await run_diagnostic(
        Diagnostic("slow", DiagnosticCategory.PERFORMANCE, slow), None, timeout=0.01, attempts=1, retry_delay=0
    )
    assert result["status"] == "timeout"


@pytest.mark.parametrize(
    "exc,expected",
    [
        (IntegrityError("INSERT", {}, Exception("duplicate key")), (ErrorCategory.DATABASE, Severity.MEDIUM)),
        (OperationalError("SELECT 1", {}, Exception("connection refused")), (ErrorCategory.DATABASE, Severity.CRITICAL)),
        (ValueError("token expired"), (ErrorCategory.AUTHENTICATION, Severity.HIGH)),
        (ValueError("invalid payload"), (ErrorCategory.VALIDATION, Severity.LOW)),
        (RuntimeError("sync conflict"), (ErrorCategory.SYNC, Severity.MEDIUM)),
        (KeyError("x"), (ErrorCategory.UNKNOWN, Severity.HIGH)),
    ],
)
def test_classify_error(exc, expected):
    assert classify_error(exc) == expected
