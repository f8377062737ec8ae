import time

import pytest

from vehicle_sim.common.config import SimulationConfig
from vehicle_sim.common.schemas import Stats
from vehicle_sim.pipeline.host import EngineHost, EngineNotRunning


def _fast_config(**overrides) -> SimulationConfig:
    values = {"min_interval_ms": 10.0, "interval_jitter_ms": 0.0, "seed": 4}
    values.update(overrides)
    return SimulationConfig(**values)


def test_host_requires_start() -> None:
    host = EngineHost(_fast_config())
    with pytest.raises(EngineNotRunning):
        host.snapshot()
    host.stop()


def test_host_runs_engine_on_background_loop() -> None:
    with EngineHost(_fast_config(confidence_threshold=0.0)) as host:
        assert host.running
        deadline = time.monotonic() + 2.0
        while host.snapshot().stats.total_cars == 0 and time.monotonic() < deadline:
            time.sleep(0.01)
        snapshot = host.snapshot()
        assert snapshot.active
        assert snapshot.stats.total_cars > 0
        assert len(snapshot.history) <= 100

        assert host.set_confidence_threshold(2.0) == 1.0
        host.set_active(False)
        stopped = host.snapshot()
        assert not stopped.active
        assert stopped.detections == ()

        host.reset()
        assert host.snapshot().stats == Stats()
    assert not host.running


def test_host_stop_is_idempotent() -> None:
    host = EngineHost(_fast_config(start_active=False))
    host.start()
    host.stop()
    host.stop()
    with pytest.raises(EngineNotRunning):
        host.start()


def test_host_failed_engine_creation_surfaces_error() -> None:
    host = EngineHost(_fast_config(min_interval_ms=0))
    with pytest.raises(ValueError):
        host.start()
    assert not host.running
    with pytest.raises(EngineNotRunning):
        host.start()
    host.stop()
