"""
Frame loop driving detect -> estimate -> filter -> publish once per refresh tick.

Cycles are strictly serialized: the next tick is only requested after the
current cycle has fully completed, so detector calls never overlap. Stopping
is cooperative and takes effect at the next cycle boundary.
"""

import asyncio
import logging
import time
from typing import Callable, List, Optional

from .errors import InvalidEstimateError, SchedulingError
from .filter_bank import FilterBank
from .interfaces import (
    FaceDetector,
    FramePreprocessor,
    FrameScheduler,
    FrameSource,
    GeometryConsumer,
    PoseEstimator,
    UpdateSink,
)
from .result_cache import ResultCache
from .types import (
    DEFAULT_REFRESH_HZ,
    EstimateResult,
    FaceUpdate,
    FrameOutcome,
    LoopState,
    TrackingParams,
)

logger = logging.getLogger(__name__)


class RefreshScheduler(FrameScheduler):
    """Requests ticks from the running asyncio loop at a fixed refresh rate."""

    def __init__(self, refresh_hz: float = DEFAULT_REFRESH_HZ):
        self.interval = 1.0 / refresh_hz

    def request_frame(self, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = asyncio.get_running_loop()
        return loop.call_later(self.interval, callback)


class FrameLoop:
    """
    Cooperative state machine running one tracking cycle per refresh tick.

    Owns the filter bank and result cache exclusively. Detector, estimator and
    scheduler failures are contained here: they are logged and never leave the
    bank or cache partially updated.
    """

    def __init__(
        self,
        detector: FaceDetector,
        estimator: PoseEstimator,
        on_update: Optional[UpdateSink] = None,
        params: Optional[TrackingParams] = None,
        filter_bank: Optional[FilterBank] = None,
        cache: Optional[ResultCache] = None,
        scheduler: Optional[FrameScheduler] = None,
        preprocessor: Optional[FramePreprocessor] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.params = params if params is not None else TrackingParams()
        self.detector = detector
        self.estimator = estimator
        self.on_update = on_update
        self.filter_bank = (
            filter_bank
            if filter_bank is not None
            else FilterBank(self.params.num_landmarks, self.params)
        )
        self.cache = cache if cache is not None else ResultCache()
        self.scheduler = (
            scheduler
            if scheduler is not None
            else RefreshScheduler(self.params.refresh_hz)
        )
        self.preprocessor = preprocessor
        self.clock = clock
        self.geometries: List[GeometryConsumer] = []

        self._state = LoopState.IDLE
        self._running = False
        self._chain_alive = False
        self._frame_source: Optional[FrameSource] = None
        self._task: Optional[asyncio.Future] = None
        self._idle_waiters: List[asyncio.Future] = []
        self._had_face = False

    # --- Run state ---

    @property
    def state(self) -> LoopState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def has_pending_cycle(self) -> bool:
        return self._chain_alive

    def start(self, frame_source: FrameSource) -> None:
        """
        Start cycling over frames pulled from frame_source.

        A no-op while already running. If a previous chain is still finishing
        its last cycle after stop(), that chain carries on instead of a second
        one being scheduled.
        """
        if self._running:
            return
        self._frame_source = frame_source
        self._running = True
        self._state = LoopState.RUNNING
        if not self._chain_alive:
            self._chain_alive = True
            self._request_next()

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        self._state = LoopState.STOPPED

    async def wait_idle(self) -> None:
        """Wait until no cycle is in flight or scheduled."""
        if not self._chain_alive:
            return
        waiter = asyncio.get_running_loop().create_future()
        self._idle_waiters.append(waiter)
        await waiter

    # --- Scheduling ---

    def _request_next(self) -> None:
        try:
            self.scheduler.request_frame(self._on_tick)
        except Exception as e:
            error = SchedulingError(f"Could not schedule next frame: {e}")
            logger.error("%s; frame loop halted until restarted", error, exc_info=e)
            self._running = False
            self._state = LoopState.STOPPED
            self._end_chain()

    def _end_chain(self) -> None:
        self._chain_alive = False
        self._task = None
        waiters, self._idle_waiters = self._idle_waiters, []
        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(None)

    def _on_tick(self) -> None:
        if not self._running:
            self._end_chain()
            return
        try:
            self._task = asyncio.ensure_future(self._run_cycle())
        except RuntimeError as e:
            logger.error("Could not start frame cycle: %s", e)
            self._running = False
            self._state = LoopState.STOPPED
            self._end_chain()

    async def _run_cycle(self) -> None:
        try:
            frame = self._frame_source() if self._frame_source is not None else None
            if frame is None:
                logger.debug("Frame source returned no frame; skipping cycle")
            else:
                await self.process_frame(frame)
        except asyncio.CancelledError:
            self._running = False
            self._state = LoopState.STOPPED
            self._end_chain()
            raise
        except Exception:
            logger.exception("Frame cycle failed")

        if self._running:
            self._request_next()
        else:
            self._end_chain()

    # --- One cycle ---

    def _preprocess(self, frame):
        if self.preprocessor is None:
            return frame
        return self.preprocessor(frame, self.params.mirror_input)

    async def warm_up(self, frame) -> None:
        """Run the detector once on a frame and discard the result."""
        await self.detector.detect(self._preprocess(frame))

    async def process_frame(self, frame) -> FrameOutcome:
        """
        Run one detect -> estimate -> filter -> publish pass.

        Args:
            frame: Raw input frame as produced by the frame source

        Returns:
            FrameOutcome: TRACKED when a stabilized result was published,
            NO_FACE when tracking was reset, DROPPED when nothing changed
        """
        image = self._preprocess(frame)

        try:
            faces = await self.detector.detect(image)
        except Exception:
            logger.exception("Face detector failed; dropping frame")
            return FrameOutcome.DROPPED

        if not faces:
            self._handle_no_face()
            return FrameOutcome.NO_FACE

        try:
            raw = self.estimator.estimate(faces[0])
        except Exception:
            logger.exception("Pose estimator failed; dropping frame")
            return FrameOutcome.DROPPED

        if raw is None or raw.face_matrix is None:
            logger.debug("Pose could not be solved for this frame; dropping it")
            return FrameOutcome.DROPPED

        timestamp = self.clock()
        try:
            filtered = self.filter_bank.filter_estimate(
                timestamp, raw, self.cache.result
            )
        except InvalidEstimateError as e:
            logger.warning("Rejected estimate: %s", e)
            return FrameOutcome.DROPPED

        if not filtered.is_complete:
            logger.warning("Stabilized estimate is incomplete; not publishing it")
            return FrameOutcome.DROPPED

        stabilized = self.cache.store(filtered)
        if not self._had_face:
            logger.info("Face acquired")
            self._had_face = True
        self._publish(FaceUpdate(has_face=True, estimate_result=stabilized))

        for geometry in list(self.geometries):
            try:
                geometry.update_positions(raw.metric_landmarks)
            except Exception:
                logger.exception("Geometry consumer %r failed to update", geometry)

        return FrameOutcome.TRACKED

    def _handle_no_face(self) -> None:
        if self._had_face:
            logger.info("Face lost; resetting filters")
            self._had_face = False
        self._publish(FaceUpdate(has_face=False, estimate_result=EstimateResult.empty()))
        self.cache.clear()
        self.filter_bank.reset_all()

    def _publish(self, update: FaceUpdate) -> None:
        if self.on_update is None:
            return
        try:
            self.on_update(update)
        except Exception:
            logger.exception("Update sink raised")
