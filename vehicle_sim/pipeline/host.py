from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Callable, TypeVar

from vehicle_sim.common.config import SimulationConfig
from vehicle_sim.common.schemas import EngineSnapshot
from vehicle_sim.pipeline.engine import DetectionEngine

logger = logging.getLogger(__name__)

T = TypeVar("T")

CALL_TIMEOUT_SECONDS = 5.0


class EngineNotRunning(RuntimeError):
    """Raised when an engine operation is requested before start() or after stop()."""


class EngineHost:
    """Runs a DetectionEngine on a private asyncio loop in a daemon thread.

    Every engine call is marshalled onto that loop, so the engine itself stays
    single-threaded no matter how many threads talk to the host.
    """

    def __init__(self, config: SimulationConfig | None = None, **engine_kwargs: Any) -> None:
        self.config = config or SimulationConfig()
        self._engine_kwargs = engine_kwargs
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run, name="detection-engine", daemon=True)
        self._engine: DetectionEngine | None = None
        self._lock = threading.Lock()
        self._stopped = False

    @property
    def running(self) -> bool:
        return self._engine is not None and self._thread.is_alive()

    def start(self) -> None:
        with self._lock:
            if self._engine is not None:
                return
            if self._stopped:
                raise EngineNotRunning("EngineHost cannot be restarted once stopped")
            self._thread.start()
            future = asyncio.run_coroutine_threadsafe(self._create_engine(), self._loop)
            try:
                self._engine = future.result(timeout=CALL_TIMEOUT_SECONDS)
            except Exception:
                logger.exception("Engine creation failed; shutting down host loop")
                self._stopped = True
                self._shutdown_loop()
                raise
        logger.info("Engine host started on thread %s", self._thread.name)

    def stop(self) -> None:
        with self._lock:
            if self._stopped:
                return
            self._stopped = True
            engine, self._engine = self._engine, None
            if engine is not None:
                asyncio.run_coroutine_threadsafe(
                    self._invoke(engine.close), self._loop
                ).result(timeout=CALL_TIMEOUT_SECONDS)
            self._shutdown_loop()
        logger.info("Engine host stopped")

    def __enter__(self) -> EngineHost:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def _shutdown_loop(self) -> None:
        if self._thread.is_alive():
            self._loop.call_soon_threadsafe(self._loop.stop)
            self._thread.join(timeout=CALL_TIMEOUT_SECONDS)
        if not self._loop.is_closed() and not self._loop.is_running():
            self._loop.close()

    def set_confidence_threshold(self, value: float) -> float:
        return self._call(lambda engine: engine.set_confidence_threshold(value))

    def set_active(self, active: bool) -> None:
        self._call(lambda engine: engine.set_active(active))

    def reset(self) -> None:
        self._call(lambda engine: engine.reset())

    def snapshot(self) -> EngineSnapshot:
        return self._call(lambda engine: engine.snapshot())

    def _call(self, operation: Callable[[DetectionEngine], T]) -> T:
        engine = self._engine
        if engine is None:
            raise EngineNotRunning("EngineHost.start() must be called first")
        future = asyncio.run_coroutine_threadsafe(
            self._invoke(lambda: operation(engine)), self._loop
        )
        return future.result(timeout=CALL_TIMEOUT_SECONDS)

    async def _create_engine(self) -> DetectionEngine:
        return DetectionEngine(self.config, loop=self._loop, **self._engine_kwargs)

    @staticmethod
    async def _invoke(operation: Callable[[], T]) -> T:
        return operation()

    def _run(self) -> None:
        asyncio.set_event_loop(self._loop)
        try:
            self._loop.run_forever()
        finally:
            logger.debug("Engine loop exited")
