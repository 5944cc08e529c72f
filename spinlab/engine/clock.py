"""SimulationClock — runs the UpdateEngine on a background thread and emits frames.

Two independent activities while running:
  1. Drive loop  — batches of ``steps_per_frame`` steps, no enforced delay,
                   yielding once per batch
  2. Frame loop  — at the target cadence (~30 Hz), if the lattice changed
                   since the last emission, capture a Frame and hand it to
                   the registered callback (latest-frame-wins, depth 1)

Only the drive loop (or ``advance()`` while stopped) writes the lattice.
A single state lock sequences step execution, lattice replacement and frame
reads, so a frame never observes a half-applied sweep.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from typing import Callable

from spinlab.config import SimulationConfig
from spinlab.core.enums import AlgorithmKind, BoundaryKind, ModelKind
from spinlab.core.frame import Frame, StateView
from spinlab.core.lattice import LatticeState
from spinlab.core.params import ParameterStore, parse_enum
from spinlab.engine.update_engine import StepResult, UpdateEngine
from spinlab.errors import InvalidParameterError, NotInitializedError, SimulationStateError
from spinlab.systems.rng import DeterministicRNG
from spinlab.utils.history import MagnetizationHistory, RollingStats, Sample

logger = logging.getLogger(__name__)

FrameCallback = Callable[[Frame], None]

MIN_FRAME_RATE = 1.0
MAX_FRAME_RATE = 120.0


class SimulationClock:
    """Owns the lattice, the parameter store and the run/stop state machine.

    Provides thread-safe access to:
      - latest frame (atomic reference swap)
      - magnetization history (lock-guarded ring buffer)
      - control commands (initialize / start / stop / advance / reset)
    """

    def __init__(self, config: SimulationConfig | None = None, rng: DeterministicRNG | None = None) -> None:
        cfg = config or SimulationConfig()
        self._config = cfg
        self._params = ParameterStore(
            temperature=cfg.temperature,
            field=cfg.field,
            boundary=cfg.boundary,
            model_kind=cfg.model_kind,
            algorithm=cfg.algorithm,
            state_count=cfg.potts_states,
            steps_per_frame=cfg.steps_per_frame,
            max_steps_per_frame=cfg.max_steps_per_frame,
        )
        self._rng = rng if rng is not None else DeterministicRNG(cfg.seed)
        self._engine = UpdateEngine()
        self._frame_interval = 1.0 / _clamp_rate(cfg.target_fps)
        self._frame_callback: FrameCallback | None = None

        # Guarded by _state_lock
        self._state_lock = threading.Lock()
        self._lattice: LatticeState | None = None
        self._sweep: int = 0

        # Thread-safe shared state
        self._frame_lock = threading.Lock()
        self._latest_frame: Frame | None = None
        self._history = MagnetizationHistory(cfg.history_points)

        # Control
        self._drive_thread: threading.Thread | None = None
        self._frame_thread: threading.Thread | None = None
        self._running = threading.Event()
        self._stop_requested = threading.Event()
        self._dirty = threading.Event()

    # -- public properties --

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def params(self) -> ParameterStore:
        return self._params

    @property
    def running(self) -> bool:
        return self._running.is_set()

    @property
    def initialized(self) -> bool:
        return self._lattice is not None

    @property
    def lattice_size(self) -> int | None:
        lattice = self._lattice
        return lattice.size if lattice else None

    @property
    def sweep(self) -> int:
        return self._sweep

    @property
    def frame_rate(self) -> float:
        return 1.0 / self._frame_interval

    @property
    def history(self) -> MagnetizationHistory:
        return self._history

    def history_stats(self) -> RollingStats | None:
        return self._history.stats()

    # -- initialization --

    def initialize(
        self,
        size: int,
        temperature: float,
        model_kind: ModelKind | str = ModelKind.BINARY,
        boundary: BoundaryKind | str | None = None,
        algorithm: AlgorithmKind | str | None = None,
    ) -> SimulationClock:
        """Allocate a fresh random lattice. Everything is validated before anything changes."""
        _check_size(size)
        kind = parse_enum("model_kind", ModelKind, model_kind)
        bound = parse_enum("boundary", BoundaryKind, boundary) if boundary is not None else None
        algo = parse_enum("algorithm", AlgorithmKind, algorithm) if algorithm is not None else None
        self._params.set_temperature(temperature)

        with self._state_lock:
            self._params.set_model_kind(kind)
            if bound is not None:
                self._params.set_boundary(bound)
            if algo is not None:
                self._params.set_algorithm(algo)
            self._replace_lattice(size, kind)

        logger.info(
            "Initialized %dx%d %s lattice (T=%.4g, boundary=%s, algorithm=%s)",
            size, size, kind.label, self._params.temperature,
            self._params.boundary.label, self._params.algorithm.label,
        )
        return self

    def set_frame_callback(self, callback: FrameCallback | None) -> SimulationClock:
        self._frame_callback = callback
        return self

    # -- lifecycle --

    def start(self) -> None:
        if self._lattice is None:
            logger.warning("start() requested before initialize(); refusing.")
            raise NotInitializedError("start")
        if self._running.is_set():
            return
        self._join_threads()
        self._stop_requested.clear()
        self._running.set()
        self._dirty.set()
        self._drive_thread = threading.Thread(target=self._drive_loop, name="spin-drive", daemon=True)
        self._frame_thread = threading.Thread(target=self._frame_loop, name="spin-frames", daemon=True)
        self._drive_thread.start()
        self._frame_thread.start()
        logger.info("SimulationClock started (steps_per_frame=%d, %.0f fps)", self._params.steps_per_frame, self.frame_rate)

    def stop(self) -> None:
        """Halt both loops and wait for them to exit.

        Blocks for at most the remainder of the step in progress. No step runs
        and no frame callback fires after this returns.
        """
        was_running = self._running.is_set()
        self._stop_requested.set()
        self._running.clear()
        self._join_threads()
        if was_running:
            logger.info("SimulationClock stopped at sweep %d.", self._sweep)

    def advance(self, sweeps: int = 1) -> list[StepResult]:
        """Run *sweeps* steps on the caller's thread, then publish a frame. Only while stopped."""
        if self._lattice is None:
            raise NotInitializedError("advance")
        if self._running.is_set():
            raise SimulationStateError("Cannot advance manually while the clock is running.")
        if isinstance(sweeps, bool) or not isinstance(sweeps, int) or sweeps < 1:
            raise InvalidParameterError("sweeps", sweeps, "must be a positive integer")
        with self._state_lock:
            results = [self._step_locked() for _ in range(sweeps)]
        self._emit_frame()
        return results

    def reset(self) -> None:
        """Re-randomize the lattice with the current size, model and state count."""
        with self._state_lock:
            if self._lattice is None:
                raise NotInitializedError("reset")
            self._replace_lattice(self._lattice.size, self._params.model_kind)
        logger.info("Lattice reset (%s, L=%d).", self._params.model_kind.label, self._lattice.size)

    # -- parameter setters (valid in either state, effective on the next step) --

    def set_temperature(self, temperature: float) -> float:
        value = self._params.set_temperature(temperature)
        logger.debug("Temperature set to %.4g (beta=%.4g)", value, self._params.beta)
        return value

    def set_field(self, field: float) -> float:
        return self._params.set_field(field)

    def set_boundary(self, boundary: BoundaryKind | str) -> BoundaryKind:
        return self._params.set_boundary(boundary)

    def set_algorithm(self, algorithm: AlgorithmKind | str) -> AlgorithmKind:
        return self._params.set_algorithm(algorithm)

    def set_steps_per_frame(self, steps: int) -> int:
        return self._params.set_steps_per_frame(steps)

    def set_model_kind(self, model_kind: ModelKind | str) -> ModelKind:
        """Switch representation; an existing lattice is reallocated and re-randomized."""
        kind = parse_enum("model_kind", ModelKind, model_kind)
        with self._state_lock:
            self._params.set_model_kind(kind)
            if self._lattice is not None and self._lattice.kind != kind:
                self._replace_lattice(self._lattice.size, kind)
                logger.info("Model switched to %s; lattice re-randomized.", kind.label)
        return kind

    def set_state_count(self, state_count: int) -> int:
        """Clamp to [2, 10]; a multi-state lattice is re-randomized with the new q."""
        with self._state_lock:
            q = self._params.set_state_count(state_count)
            lattice = self._lattice
            if lattice is not None and lattice.kind == ModelKind.MULTI_STATE and lattice.states != q:
                self._replace_lattice(lattice.size, lattice.kind)
                logger.info("Potts state count set to %d; lattice re-randomized.", q)
        return q

    def set_lattice_size(self, size: int) -> int:
        _check_size(size)
        with self._state_lock:
            if self._lattice is None:
                raise NotInitializedError("resize")
            self._replace_lattice(size, self._params.model_kind)
        logger.info("Lattice resized to %dx%d.", size, size)
        return size

    def set_frame_rate(self, fps: float) -> float:
        rate = _clamp_rate(fps)
        self._frame_interval = 1.0 / rate
        return rate

    # -- snapshot access --

    def latest_frame(self) -> Frame | None:
        with self._frame_lock:
            return self._latest_frame

    def get_current_state(self) -> StateView | None:
        """On-demand snapshot, outside the frame cadence. None before initialize()."""
        with self._state_lock:
            if self._lattice is None:
                return None
            return StateView.capture(self._lattice, self._sweep)

    # -- internals --

    def _replace_lattice(self, size: int, kind: ModelKind) -> None:
        """Caller holds _state_lock."""
        self._lattice = LatticeState.create(size, kind, self._params.state_count, self._rng)
        self._sweep = 0
        self._history.clear()
        self._dirty.set()

    def _step_locked(self) -> StepResult:
        """Caller holds _state_lock."""
        assert self._lattice is not None
        result = self._engine.step(self._lattice, self._params.current(), self._rng)
        self._sweep += 1
        if result.changed:
            self._dirty.set()
        return result

    def _drive_loop(self) -> None:
        """Background thread: step batches as fast as possible."""
        logger.info("Drive thread started.")
        try:
            while not self._stop_requested.is_set():
                t0 = time.perf_counter()
                with self._state_lock:
                    # Cancellation takes effect before the next batch begins
                    if self._stop_requested.is_set():
                        break
                    batch = self._params.steps_per_frame
                    for _ in range(batch):
                        self._step_locked()
                        # A stop request cuts the batch short at a step boundary
                        if self._stop_requested.is_set():
                            break
                logger.debug("Batch of %d steps in %.4fs (sweep %d)", batch, time.perf_counter() - t0, self._sweep)
                # Let setters and the frame thread in between batches
                time.sleep(0)
        except Exception:
            logger.exception("Drive loop failed at sweep %d; stopping.", self._sweep)
            self._stop_requested.set()
            self._running.clear()
        logger.info("Drive thread exited.")

    def _frame_loop(self) -> None:
        """Background thread: emit at most one frame per interval, only when dirty."""
        next_due = time.monotonic()
        while not self._stop_requested.is_set():
            wait = next_due - time.monotonic()
            if wait > 0:
                self._stop_requested.wait(wait)
                continue
            next_due = time.monotonic() + self._frame_interval
            if self._dirty.is_set():
                self._emit_frame()

    def _emit_frame(self) -> Frame | None:
        with self._state_lock:
            if self._lattice is None:
                return None
            self._dirty.clear()
            frame = Frame.capture(self._lattice, self._sweep, time.monotonic())

        with self._frame_lock:
            self._latest_frame = frame
        self._history.append(Sample(sweep=frame.sweep, value=frame.order_parameter, timestamp=frame.timestamp))

        callback = self._frame_callback
        if callback is not None:
            try:
                callback(frame)
            except Exception:
                logger.exception("Frame callback failed at sweep %d", frame.sweep)
        return frame

    def _join_threads(self) -> None:
        current = threading.current_thread()
        for thread in (self._drive_thread, self._frame_thread):
            if thread is not None and thread.is_alive() and thread is not current:
                # Both loops exit at the next step boundary
                thread.join()


def _check_size(size: object) -> None:
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise InvalidParameterError("size", size, "lattice size must be a positive integer")


def _clamp_rate(fps: float) -> float:
    try:
        rate = float(fps)
    except (TypeError, ValueError):
        raise InvalidParameterError("frame_rate", fps, "expected a number") from None
    if math.isnan(rate):
        raise InvalidParameterError("frame_rate", fps, "expected a number")
    return max(MIN_FRAME_RATE, min(MAX_FRAME_RATE, rate))


def initialize(
    size: int,
    temperature: float,
    model_kind: ModelKind | str = ModelKind.BINARY,
    boundary: BoundaryKind | str | None = None,
    algorithm: AlgorithmKind | str | None = None,
    config: SimulationConfig | None = None,
    rng: DeterministicRNG | None = None,
) -> SimulationClock:
    """Build a clock and initialize its lattice in one call."""
    return SimulationClock(config, rng).initialize(size, temperature, model_kind, boundary, algorithm)
