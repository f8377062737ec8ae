import random

from vehicle_sim.detection.scenarios import SCENARIO_PROFILES, Scenario
from vehicle_sim.detection.synthetic import SyntheticDetector


def test_light_traffic_at_epoch_start() -> None:
    detector = SyntheticDetector(seed=42)
    bike_batches = 0
    runs = 2000
    for _ in range(runs):
        detections = detector.generate(Scenario.LIGHT, 0)
        cars = [d for d in detections if d.type == "car"]
        bikes = [d for d in detections if d.type == "bike"]
        assert 1 <= len(cars) <= 2
        assert all(0.82 <= d.confidence < 0.97 for d in cars)
        assert len(bikes) <= 1
        assert all(0.78 <= d.confidence < 0.96 for d in bikes)
        bike_batches += len(bikes)
    assert 0.35 < bike_batches / runs < 0.45


def test_generation_stays_within_profile_ranges() -> None:
    detector = SyntheticDetector(seed=7)
    for scenario, profile in SCENARIO_PROFILES.items():
        for _ in range(200):
            detections = detector.generate(scenario, 123_000)
            for vehicle_type in ("car", "bike"):
                vehicle = profile.for_type(vehicle_type)
                typed = [d for d in detections if d.type == vehicle_type]
                assert len(typed) <= vehicle.count.maximum
                if vehicle.count.probability == 1.0:
                    assert len(typed) >= vehicle.count.minimum
                for detection in typed:
                    assert vehicle.confidence.low <= detection.confidence < vehicle.confidence.high
                    assert vehicle.x.low <= detection.x < vehicle.x.high
                    assert vehicle.y.low <= detection.y < vehicle.y.high
                    assert vehicle.width.low <= detection.width < vehicle.width.high
                    assert vehicle.height.low <= detection.height < vehicle.height.high


def test_cars_precede_bikes_and_ids_are_unique() -> None:
    detector = SyntheticDetector(seed=1)
    detections = detector.generate(Scenario.HEAVY, 1_700_000_000_000)
    types = [d.type for d in detections]
    assert types == sorted(types, key=lambda value: value != "car")
    ids = [d.id for d in detections]
    assert len(ids) == len(set(ids))
    assert ids[0] == "car-1700000000000-0"
    assert all(d.timestamp == 1_700_000_000_000 for d in detections)


def test_same_seed_reproduces_batches() -> None:
    first = SyntheticDetector(random.Random(99))
    second = SyntheticDetector(random.Random(99))
    for scenario in Scenario:
        assert first.generate(scenario, 5) == second.generate(scenario, 5)
