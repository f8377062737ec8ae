from __future__ import annotations

import logging
import random
from typing import Callable

from vehicle_sim.common.config import SimulationConfig
from vehicle_sim.common.schemas import Detection, EngineSnapshot, Stats, detections_by_type
from vehicle_sim.common.utils import clamp_threshold, now_millis
from vehicle_sim.counting.aggregation import append_history, update_stats
from vehicle_sim.detection.base import DetectionSource
from vehicle_sim.detection.filtering import filter_by_confidence
from vehicle_sim.detection.scenarios import select_scenario
from vehicle_sim.detection.synthetic import SyntheticDetector
from vehicle_sim.pipeline.clock import Scheduler, SimulationClock

logger = logging.getLogger(__name__)

Listener = Callable[[EngineSnapshot], None]


class DetectionEngine:
    """Drives the simulated detection feed.

    Each tick selects a scenario from the current time, generates a raw batch,
    filters it against the confidence threshold, then publishes the batch and
    folds it into the stats and history. State is replaced, never mutated in
    place, so a snapshot taken at any point is a consistent view.
    """

    def __init__(
        self,
        config: SimulationConfig | None = None,
        loop: Scheduler | None = None,
        rng: random.Random | None = None,
        detector: DetectionSource | None = None,
        time_source: Callable[[], int] = now_millis,
    ) -> None:
        config = config or SimulationConfig()
        self.random = rng if rng is not None else random.Random(config.seed)
        self._detector = detector if detector is not None else SyntheticDetector(self.random)
        self._now = time_source
        self._threshold = self._clamp(config.confidence_threshold)
        self._detections: tuple[Detection, ...] = ()
        self._stats = Stats()
        self._history: tuple[Detection, ...] = ()
        self._listeners: list[Listener] = []
        self._clock = SimulationClock(
            self.tick,
            loop=loop,
            rng=self.random,
            min_interval_ms=config.min_interval_ms,
            interval_jitter_ms=config.interval_jitter_ms,
        )
        if config.start_active:
            self._clock.start()

    @property
    def active(self) -> bool:
        return self._clock.running

    @property
    def clock(self) -> SimulationClock:
        return self._clock

    @property
    def confidence_threshold(self) -> float:
        return self._threshold

    @property
    def current_detections(self) -> tuple[Detection, ...]:
        return self._detections

    @property
    def stats(self) -> Stats:
        return self._stats

    @property
    def history(self) -> tuple[Detection, ...]:
        return self._history

    def snapshot(self) -> EngineSnapshot:
        return EngineSnapshot(
            active=self.active,
            confidence_threshold=self._threshold,
            detections=self._detections,
            stats=self._stats,
            history=self._history,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_confidence_threshold(self, value: float) -> float:
        threshold = self._clamp(value)
        if threshold == self._threshold:
            return threshold
        self._threshold = threshold
        logger.info("Confidence threshold set to %.2f", threshold)
        if self._clock.running:
            self._clock.restart()
        return threshold

    def set_active(self, active: bool) -> None:
        if active:
            self._clock.start()
            return
        if self._clock.stop():
            self._detections = ()
            self._publish()

    def reset(self) -> None:
        self._detections = ()
        self._stats = Stats()
        self._history = ()
        logger.info("Detection statistics reset")
        self._publish()

    def tick(self) -> tuple[Detection, ...]:
        now = self._now()
        scenario = select_scenario(now)
        raw = self._detector.generate(scenario, now)
        batch = tuple(filter_by_confidence(raw, self._threshold))
        stats = update_stats(self._stats, batch, self.random)
        history = append_history(self._history, batch)
        self._detections, self._stats, self._history = batch, stats, history
        logger.debug(
            "Tick scenario=%s generated=%s published=%s counts=%s",
            scenario.name.lower(),
            len(raw),
            len(batch),
            detections_by_type(batch),
        )
        self._publish()
        return batch

    def close(self) -> None:
        self._clock.stop()
        self._listeners.clear()

    def __enter__(self) -> DetectionEngine:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @staticmethod
    def _clamp(value: float) -> float:
        threshold = clamp_threshold(value)
        if threshold != float(value):
            logger.warning("Confidence threshold %s clamped to %s", value, threshold)
        return threshold

    def _publish(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Detection listener %r failed", listener)
