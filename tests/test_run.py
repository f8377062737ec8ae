import sys

import pandas as pd

from vehicle_sim.pipeline import run


def test_run_exports_history(tmp_path, monkeypatch) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "simulation:\n"
        "  min_interval_ms: 10\n"
        "  interval_jitter_ms: 0\n"
        "  confidence_threshold: 0.0\n"
        f"data_paths:\n  logs_dir: {tmp_path.as_posix()}/logs\n",
        encoding="utf-8",
    )
    export_path = tmp_path / "history.csv"
    monkeypatch.setattr(
        sys,
        "argv",
        [
            "run",
            "--config",
            str(config_path),
            "--duration",
            "0.2",
            "--seed",
            "3",
            "--export",
            str(export_path),
        ],
    )
    assert run.main() == 0
    history = pd.read_csv(export_path)
    assert 0 < len(history) <= 100
    assert set(history["type"]) <= {"car", "bike"}


def test_run_rejects_bad_duration(monkeypatch) -> None:
    monkeypatch.setattr(sys, "argv", ["run", "--duration", "0"])
    assert run.main() == 1
