from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import yaml


DEFAULT_CONFIG: dict[str, Any] = {
    "simulation": {
        "confidence_threshold": 0.5,
        "start_active": True,
        "min_interval_ms": 1500.0,
        "interval_jitter_ms": 1500.0,
        "seed": None,
    },
    "dashboard": {
        "refresh_seconds": 1.0,
        "frame_width": 1280,
        "frame_height": 720,
        "threshold_min": 0.1,
        "threshold_max": 0.95,
        "threshold_step": 0.05,
    },
    "data_paths": {
        "logs_dir": "data/logs",
    },
}


@dataclass(frozen=True)
class SimulationConfig:
    confidence_threshold: float = 0.5
    start_active: bool = True
    min_interval_ms: float = 1500.0
    interval_jitter_ms: float = 1500.0
    seed: int | None = None


@dataclass(frozen=True)
class DashboardConfig:
    refresh_seconds: float = 1.0
    frame_width: int = 1280
    frame_height: int = 720
    threshold_min: float = 0.1
    threshold_max: float = 0.95
    threshold_step: float = 0.05

    @property
    def frame_size(self) -> tuple[int, int]:
        return self.frame_width, self.frame_height


@dataclass(frozen=True)
class DataPaths:
    logs_dir: str = "data/logs"


@dataclass(frozen=True)
class AppConfig:
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    dashboard: DashboardConfig = field(default_factory=DashboardConfig)
    data_paths: DataPaths = field(default_factory=DataPaths)


def deep_update(base: dict[str, Any], updates: dict[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in updates.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = deep_update(result[key], value)
        else:
            result[key] = value
    return result


def validate_config(config: AppConfig) -> None:
    simulation = config.simulation
    if not (0.0 <= simulation.confidence_threshold <= 1.0):
        raise ValueError("simulation.confidence_threshold must be between 0 and 1")
    if simulation.min_interval_ms <= 0:
        raise ValueError("simulation.min_interval_ms must be > 0")
    if simulation.interval_jitter_ms < 0:
        raise ValueError("simulation.interval_jitter_ms must be >= 0")
    dashboard = config.dashboard
    if dashboard.refresh_seconds <= 0:
        raise ValueError("dashboard.refresh_seconds must be > 0")
    if dashboard.frame_width <= 0 or dashboard.frame_height <= 0:
        raise ValueError("dashboard frame size must be > 0")
    if not (0.0 <= dashboard.threshold_min < dashboard.threshold_max <= 1.0):
        raise ValueError(
            "dashboard thresholds must satisfy 0 <= threshold_min < threshold_max <= 1"
        )
    if dashboard.threshold_step <= 0:
        raise ValueError("dashboard.threshold_step must be > 0")


def load_config(path: str) -> AppConfig:
    with open(path, "r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    merged = deep_update(DEFAULT_CONFIG, data)
    simulation_dict = merged.get("simulation", {})
    dashboard_dict = merged.get("dashboard", {})
    data_paths_dict = merged.get("data_paths", {})
    config = AppConfig(
        simulation=SimulationConfig(
            confidence_threshold=float(simulation_dict.get("confidence_threshold", 0.5)),
            start_active=bool(simulation_dict.get("start_active", True)),
            min_interval_ms=float(simulation_dict.get("min_interval_ms", 1500.0)),
            interval_jitter_ms=float(simulation_dict.get("interval_jitter_ms", 1500.0)),
            seed=(
                int(simulation_dict["seed"])
                if simulation_dict.get("seed") is not None
                else None
            ),
        ),
        dashboard=DashboardConfig(
            refresh_seconds=float(dashboard_dict.get("refresh_seconds", 1.0)),
            frame_width=int(dashboard_dict.get("frame_width", 1280)),
            frame_height=int(dashboard_dict.get("frame_height", 720)),
            threshold_min=float(dashboard_dict.get("threshold_min", 0.1)),
            threshold_max=float(dashboard_dict.get("threshold_max", 0.95)),
            threshold_step=float(dashboard_dict.get("threshold_step", 0.05)),
        ),
        data_paths=DataPaths(
            logs_dir=str(data_paths_dict.get("logs_dir", "data/logs")),
        ),
    )
    validate_config(config)
    return config
