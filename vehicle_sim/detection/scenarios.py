"""Traffic scenarios and the generation profile table.

The simulated feed cycles through five fixed traffic-density scenarios, each
held for ``SCENARIO_DWELL_MS``. A scenario maps to a ``GenerationProfile``
describing, per vehicle type, how many instances to draw and the uniform
ranges each field is drawn from.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum

SCENARIO_DWELL_MS = 8000


class Scenario(IntEnum):
    LIGHT = 0
    MIXED = 1
    HEAVY = 2
    BIKE_HEAVY = 3
    MODERATE = 4


@dataclass(frozen=True)
class UniformRange:
    low: float
    span: float

    @property
    def high(self) -> float:
        return self.low + self.span

    def draw(self, rng: random.Random) -> float:
        return self.low + rng.random() * self.span


@dataclass(frozen=True)
class CountRange:
    """``minimum + randrange(spread)`` instances, gated by ``probability``."""

    minimum: int
    spread: int = 1
    probability: float = 1.0

    @property
    def maximum(self) -> int:
        return self.minimum + self.spread - 1

    def draw(self, rng: random.Random) -> int:
        if self.probability < 1.0 and rng.random() >= self.probability:
            return 0
        return self.minimum + rng.randrange(self.spread)


@dataclass(frozen=True)
class VehicleProfile:
    count: CountRange
    confidence: UniformRange
    x: UniformRange
    y: UniformRange
    width: UniformRange
    height: UniformRange


@dataclass(frozen=True)
class GenerationProfile:
    name: str
    car: VehicleProfile
    bike: VehicleProfile

    def for_type(self, vehicle_type: str) -> VehicleProfile:
        if vehicle_type == "car":
            return self.car
        if vehicle_type == "bike":
            return self.bike
        raise KeyError(f"Unknown vehicle type: {vehicle_type}")


def _vehicle(
    count: CountRange,
    confidence: tuple[float, float],
    x: tuple[float, float],
    y: tuple[float, float],
    width: tuple[float, float],
    height: tuple[float, float],
) -> VehicleProfile:
    return VehicleProfile(
        count=count,
        confidence=UniformRange(*confidence),
        x=UniformRange(*x),
        y=UniformRange(*y),
        width=UniformRange(*width),
        height=UniformRange(*height),
    )


SCENARIO_PROFILES: dict[Scenario, GenerationProfile] = {
    Scenario.LIGHT: GenerationProfile(
        name="light",
        car=_vehicle(CountRange(1, 2), (0.82, 0.15), (10, 60), (30, 40), (15, 10), (10, 6)),
        bike=_vehicle(
            CountRange(1, 1, probability=0.4),
            (0.78, 0.18),
            (70, 20),
            (45, 25),
            (5, 4),
            (7, 3),
        ),
    ),
    Scenario.MIXED: GenerationProfile(
        name="mixed",
        car=_vehicle(CountRange(2, 2), (0.80, 0.17), (5, 70), (25, 45), (14, 12), (9, 7)),
        bike=_vehicle(CountRange(1, 2), (0.75, 0.20), (15, 70), (40, 30), (4, 5), (6, 4)),
    ),
    Scenario.HEAVY: GenerationProfile(
        name="heavy",
        car=_vehicle(CountRange(3, 3), (0.77, 0.20), (0, 80), (20, 50), (12, 14), (8, 8)),
        bike=_vehicle(CountRange(2, 3), (0.73, 0.22), (0, 85), (35, 40), (3, 6), (5, 5)),
    ),
    Scenario.BIKE_HEAVY: GenerationProfile(
        name="bike-heavy",
        car=_vehicle(CountRange(1, 2), (0.85, 0.12), (20, 50), (30, 30), (16, 8), (11, 5)),
        bike=_vehicle(CountRange(3, 3), (0.79, 0.18), (0, 80), (40, 35), (4, 4), (6, 3)),
    ),
    Scenario.MODERATE: GenerationProfile(
        name="moderate",
        car=_vehicle(CountRange(2, 2), (0.83, 0.14), (10, 65), (25, 40), (15, 9), (10, 6)),
        bike=_vehicle(CountRange(1, 3), (0.76, 0.19), (20, 60), (45, 25), (5, 3), (7, 2)),
    ),
}


def select_scenario(now_millis: int, dwell_ms: int = SCENARIO_DWELL_MS) -> Scenario:
    if dwell_ms <= 0:
        raise ValueError("dwell_ms must be > 0")
    return Scenario((int(now_millis) // dwell_ms) % len(Scenario))


def profile_for(scenario: Scenario | int) -> GenerationProfile:
    return SCENARIO_PROFILES[Scenario(scenario)]
