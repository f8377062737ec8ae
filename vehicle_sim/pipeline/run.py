from __future__ import annotations

import argparse
import asyncio
import logging
from dataclasses import replace
from pathlib import Path

from vehicle_sim.analytics.frames import export_history_csv
from vehicle_sim.common.config import AppConfig, SimulationConfig, load_config
from vehicle_sim.common.logging import configure_logging
from vehicle_sim.common.schemas import EngineSnapshot, Stats
from vehicle_sim.pipeline.engine import DetectionEngine

logger = logging.getLogger(__name__)


def _log_tick(snapshot: EngineSnapshot) -> None:
    logger.info(
        "Published %s detections (avg confidence %.3f, processing %.1f ms)",
        snapshot.stats.current_detections,
        snapshot.stats.avg_confidence,
        snapshot.stats.processing_time,
    )


async def simulate(config: SimulationConfig, duration_seconds: float) -> EngineSnapshot:
    with DetectionEngine(replace(config, start_active=True)) as engine:
        engine.subscribe(_log_tick)
        await asyncio.sleep(duration_seconds)
        return engine.snapshot()


def _log_summary(stats: Stats, history_size: int) -> None:
    logger.info(
        "Simulation finished: cars=%s bikes=%s last_avg_confidence=%.3f history=%s",
        stats.total_cars,
        stats.total_bikes,
        stats.avg_confidence,
        history_size,
    )


def main() -> int:
    parser = argparse.ArgumentParser(description="Run the simulated vehicle detection feed")
    parser.add_argument("--config", default="config.yaml", help="Path to config YAML")
    parser.add_argument(
        "--duration", type=float, default=30.0, help="Seconds to run the simulation"
    )
    parser.add_argument("--threshold", type=float, default=None, help="Confidence threshold")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--export", default=None, help="Write the history buffer to this CSV")
    args = parser.parse_args()

    try:
        if args.duration <= 0:
            raise ValueError("--duration must be > 0")
        config_path = args.config
        if Path(config_path).exists():
            config = load_config(config_path)
        else:
            config = AppConfig()
        configure_logging(config.data_paths.logs_dir)
        if not Path(config_path).exists():
            logger.warning("Config not found at %s; using defaults", config_path)

        simulation = config.simulation
        if args.threshold is not None:
            simulation = replace(simulation, confidence_threshold=args.threshold)
        if args.seed is not None:
            simulation = replace(simulation, seed=args.seed)

        snapshot = asyncio.run(simulate(simulation, args.duration))
        _log_summary(snapshot.stats, len(snapshot.history))
        if args.export:
            rows = export_history_csv(snapshot.history, args.export)
            logger.info("Exported %s history rows to %s", rows, args.export)
        return 0
    except Exception:
        logger.exception(
            "Simulation failed",
            extra={"config": args.config, "duration": args.duration},
        )
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
