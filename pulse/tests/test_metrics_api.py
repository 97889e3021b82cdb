from __future__ import annotations

from pathlib import Path
import re
import sys

import pytest
from fastapi.testclient import TestClient
from prometheus_client import CollectorRegistry, Gauge


ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from pulse.app.core.config import Settings
from pulse.app.core.observability import MetricsExporter, build_registry
from pulse.app.main import create_app


SAMPLE_LINE = re.compile(r"^([a-zA-Z_:][a-zA-Z0-9_:]*)(\{[^}]*\})? (\S+)$")

client = TestClient(create_app(Settings()))


def _parse(body: str) -> dict[str, float]:
    samples: dict[str, float] = {}
    for line in body.splitlines():
        if not line or line.startswith("#"):
            continue
        match = SAMPLE_LINE.match(line)
        assert match is not None, f"malformed exposition line: {line!r}"
        name, labels, value = match.groups()
        samples[name + (labels or "")] = float(value)
    return samples


def test_metrics_content_type_and_default_names() -> None:
    response = client.get("/metrics")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")

    lines = response.text.splitlines()
    assert any(line.startswith("python_info") for line in lines)
    assert any(line.startswith("process_uptime_seconds") for line in lines)
    assert "# TYPE process_uptime_seconds gauge" in lines


def test_exposition_is_well_formed() -> None:
    samples = _parse(client.get("/metrics").text)
    assert samples
    assert samples["process_uptime_seconds"] >= 0.0


def test_consecutive_scrapes_are_stable() -> None:
    first = _parse(client.get("/metrics").text)
    second = _parse(client.get("/metrics").text)

    assert set(first) == set(second)
    for name, value in first.items():
        if name.startswith("process_uptime_seconds") or "_total" in name:
            assert second[name] >= value, name


def test_duplicate_metric_name_is_rejected() -> None:
    registry = build_registry(Settings(), uptime=lambda: 1.0)
    with pytest.raises(ValueError):
        Gauge("process_uptime_seconds", "duplicate", registry=registry)


def test_namespace_prefixes_uptime_metric() -> None:
    registry = build_registry(Settings(metrics_namespace="pulse"), uptime=lambda: 3.0)
    body = MetricsExporter(registry).render_exposition().decode("utf-8")
    assert "pulse_process_uptime_seconds 3.0" in body.splitlines()


def test_default_metrics_can_be_disabled() -> None:
    registry = build_registry(Settings(default_metrics_enabled=False), uptime=lambda: 1.0)
    assert MetricsExporter(registry).render_exposition() == b""


class _BrokenCollector:
    def collect(self):
        raise RuntimeError("collector offline")


def test_collector_failure_only_affects_metrics() -> None:
    registry = CollectorRegistry()
    registry.register(_BrokenCollector())
    broken = TestClient(create_app(Settings(), registry=registry))

    response = broken.get("/metrics")
    assert response.status_code == 500
    detail = response.json()["detail"]
    assert detail["error"] == "metrics_unavailable"
    assert "collector offline" in detail["message"]

    assert broken.get("/api/v1").status_code == 200
