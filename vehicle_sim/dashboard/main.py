from __future__ import annotations

import argparse
import logging
import os
import sys

import cv2
import streamlit as st

from vehicle_sim.analytics.frames import history_breakdown, live_detections_table
from vehicle_sim.common.config import AppConfig, load_config
from vehicle_sim.common.logging import configure_logging
from vehicle_sim.detection.visualizer import blank_frame, draw_detections
from vehicle_sim.pipeline.host import EngineHost

logger = logging.getLogger(__name__)

THRESHOLD_KEY = "confidence_threshold"


def _is_running_with_streamlit() -> bool:
    try:
        from streamlit.runtime.scriptrunner import get_script_run_ctx

        return get_script_run_ctx() is not None
    except Exception:
        return False


def _run_streamlit() -> int:
    from streamlit.web.cli import main as stcli

    sys.argv = ["streamlit", "run", __file__, "--"] + sys.argv[1:]
    try:
        return int(stcli() or 0)
    except SystemExit as exc:
        return int(exc.code or 0)


def _get_config_path() -> str:
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument("--config", default=os.getenv("VEHICLE_SIM_CONFIG", "config.yaml"))
    args, _ = parser.parse_known_args()
    return args.config


@st.cache_resource
def _load_app_config(config_path: str) -> AppConfig:
    config = load_config(config_path) if os.path.exists(config_path) else AppConfig()
    configure_logging(config.data_paths.logs_dir)
    return config


@st.cache_resource
def _get_host(config_path: str) -> EngineHost:
    config = _load_app_config(config_path)
    host = EngineHost(config.simulation)
    host.start()
    return host


def _apply_threshold(host: EngineHost) -> None:
    host.set_confidence_threshold(st.session_state[THRESHOLD_KEY])


def _render_sidebar(host: EngineHost, config: AppConfig) -> None:
    snapshot = host.snapshot()
    st.sidebar.header("Detection Settings")
    # Pushes a threshold only when moved.
    st.sidebar.slider(
        "Confidence Threshold",
        min_value=config.dashboard.threshold_min,
        max_value=config.dashboard.threshold_max,
        value=min(
            config.dashboard.threshold_max,
            max(config.dashboard.threshold_min, snapshot.confidence_threshold),
        ),
        step=config.dashboard.threshold_step,
        key=THRESHOLD_KEY,
        on_change=_apply_threshold,
        args=(host,),
    )
    st.sidebar.caption(f"Engine threshold: {snapshot.confidence_threshold:.2f}")

    label = "Stop Detection" if snapshot.active else "Start Detection"
    if st.sidebar.button(label, use_container_width=True):
        host.set_active(not snapshot.active)
        st.rerun()
    if st.sidebar.button("Reset", use_container_width=True):
        host.reset()
        st.rerun()


def _render_feed(host: EngineHost, config: AppConfig) -> None:
    snapshot = host.snapshot()
    stats = snapshot.stats

    header, status = st.columns([3, 1])
    header.metric("Current Detections", stats.current_detections)
    status.markdown("**DETECTING**" if snapshot.active else "**DETECTION OFF**")

    width, height = config.dashboard.frame_size
    frame = draw_detections(blank_frame(width, height), snapshot.detections)
    st.image(
        cv2.cvtColor(frame, cv2.COLOR_BGR2RGB),
        caption="AI Detection Demo Mode",
        use_container_width=True,
    )

    st.subheader("Detection Statistics")
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Cars Detected", stats.total_cars)
    col2.metric("Bikes Detected", stats.total_bikes)
    col3.metric("Avg Confidence", f"{stats.avg_confidence * 100:.1f}%")
    col4.metric("Processing Time", f"{stats.processing_time:.1f}ms")
    st.progress(min(1.0, max(0.0, stats.avg_confidence)))

    st.subheader("Live Detections")
    if not snapshot.detections:
        st.caption("Scanning for vehicles..." if snapshot.active else "Detection stopped")
    else:
        st.dataframe(
            live_detections_table(snapshot.detections),
            hide_index=True,
            use_container_width=True,
        )

    st.subheader("Recent History")
    breakdown = history_breakdown(snapshot.history)
    st.bar_chart(breakdown.set_index("vehicle_type")["count"], use_container_width=True)


def main() -> int:
    try:
        if not _is_running_with_streamlit():
            return _run_streamlit()
        st.set_page_config(page_title="AI Vehicle Detection", layout="wide")
        config_path = _get_config_path()
        config = _load_app_config(config_path)
        host = _get_host(config_path)

        st.title("AI Vehicle Detection")
        st.caption("Real-time Car & Bike Detection System")
        _render_sidebar(host, config)

        @st.fragment(run_every=config.dashboard.refresh_seconds)
        def live_feed() -> None:
            _render_feed(host, config)

        live_feed()
        return 0
    except Exception:
        logger.exception("Dashboard failed", extra={"config": _get_config_path()})
        return 1


if __name__ == "__main__":
    if _is_running_with_streamlit():
        main()
    else:
        raise SystemExit(main())
