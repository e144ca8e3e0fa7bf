"""
Asynchronous full-image effect generation with request coalescing.

An EffectCoordinator runs one effect computation at a time on its own
single-thread executor. Requests submitted while a computation is running
are collapsed into one pending request holding the latest parameters, which
starts as soon as the running computation has delivered its result.

Classes:
    GenerationState: Idle / Running
    GenerationRequest: Effect parameter plus a private copy of the source
    GenerationResult: A finished request and the image it produced
    EffectCoordinator: The submit / coalesce / restart state machine

Example:
    >>> coordinator = EffectCoordinator(pixelate, on_result=show)
    >>> coordinator.submit(16, image)   # starts
    True
    >>> coordinator.submit(24, image)   # coalesced
    False
    >>> coordinator.submit(32, image)   # replaces 24
    False
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional
import logging
import threading

from MP_Libs.ImageEditingLib.image_models import ImageBuffer
from MP_Libs.constants import GENERATOR_THREAD_PREFIX

logger = logging.getLogger(__name__)

EffectFunction = Callable[[ImageBuffer, Any], ImageBuffer]


class GenerationState(Enum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass(frozen=True)
class GenerationRequest:
    """Effect parameter and the source snapshot it applies to."""
    param: Any
    source: ImageBuffer


@dataclass(frozen=True)
class GenerationResult:
    """Output of one completed generation.

    Attributes:
        request: The request that was computed
        image: Effect output, or a copy of the source if the effect failed
        failed: True when the effect raised and the identity fallback was used
    """
    request: GenerationRequest
    image: ImageBuffer
    failed: bool = False


class EffectCoordinator:
    """
    Runs a full-image effect off the interactive thread, one at a time.

    submit() snapshots the source buffer. While a computation runs, further
    submits only overwrite a single pending slot; when the running
    computation finishes, its result is delivered and the pending request (if
    any) is started immediately with the latest parameters.

    Callbacks:
        on_result(GenerationResult): Once per computation, on the worker thread
        on_started(GenerationRequest): Whenever a computation begins; called
            on the submitting thread for a first start and on the worker
            thread for a restart
    """

    def __init__(
        self,
        effect: EffectFunction,
        on_result: Callable[[GenerationResult], None],
        on_started: Optional[Callable[[GenerationRequest], None]] = None,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        if not callable(effect):
            raise ValueError(f"effect must be callable, got {type(effect)}")

        self._effect = effect
        self._on_result = on_result
        self._on_started = on_started

        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix=GENERATOR_THREAD_PREFIX,
        )

        self._condition = threading.Condition()
        self._state = GenerationState.IDLE
        self._pending: Optional[GenerationRequest] = None
        self._restart = False
        self._generations_started = 0
        self._closed = False

    @property
    def state(self) -> GenerationState:
        with self._condition:
            return self._state

    @property
    def is_running(self) -> bool:
        return self.state is GenerationState.RUNNING

    @property
    def generations_started(self) -> int:
        """Number of computations started since construction."""
        with self._condition:
            return self._generations_started

    def submit(self, param: Any, source: ImageBuffer) -> bool:
        """
        Request a generation of the effect with param over source.

        Args:
            param: Effect parameter (denominator, radius, ...)
            source: Buffer to process; copied before this call returns

        Returns:
            True if a computation was started, False if the request was
            coalesced into the pending slot of a running computation or
            could not be scheduled

        Raises:
            RuntimeError: If the coordinator has been shut down
        """
        request = GenerationRequest(param, source.copy())

        with self._condition:
            if self._closed:
                raise RuntimeError("Cannot submit a generation after shutdown")

            if self._state is GenerationState.RUNNING:
                self._pending = request
                self._restart = True
                logger.debug(f"Generation running, coalescing request param={param}")
                return False

            self._state = GenerationState.RUNNING
            self._generations_started += 1

        return self._start(request)

    def wait_until_idle(self, timeout: Optional[float] = None) -> bool:
        """
        Block until no computation is running or pending.

        Returns:
            True if idle, False if the timeout expired first
        """
        with self._condition:
            return self._condition.wait_for(
                lambda: self._state is GenerationState.IDLE,
                timeout=timeout,
            )

    def shutdown(self, wait: bool = True) -> None:
        """
        Stop accepting work and release the worker thread.

        A pending request is dropped. The worker thread is only shut down if
        this coordinator created it.
        """
        with self._condition:
            self._closed = True
            if self._pending is not None:
                logger.debug(f"Dropping pending generation param={self._pending.param}")
            self._pending = None
            self._restart = False

        if self._owns_executor:
            self._executor.shutdown(wait=wait)

        with self._condition:
            self._state = GenerationState.IDLE
            self._condition.notify_all()

    def _start(self, request: GenerationRequest) -> bool:
        logger.debug(f"Starting generation param={request.param}")
        if self._on_started is not None:
            try:
                self._on_started(request)
            except Exception:
                logger.exception("Generation start handler failed")

        try:
            self._executor.submit(self._run, request)
        except RuntimeError as e:
            logger.warning(f"Could not schedule generation param={request.param}: {e}")
            self._go_idle()
            return False
        return True

    def _go_idle(self) -> None:
        with self._condition:
            self._pending = None
            self._restart = False
            self._state = GenerationState.IDLE
            self._condition.notify_all()

    def _compute(self, request: GenerationRequest) -> GenerationResult:
        try:
            image = self._effect(request.source.copy(), request.param)
        except Exception:
            logger.exception(f"Effect failed for param={request.param}, delivering source unchanged")
            return GenerationResult(request, request.source.copy(), failed=True)
        return GenerationResult(request, image)

    def _run(self, request: GenerationRequest) -> None:
        result = self._compute(request)

        try:
            self._on_result(result)
        except Exception:
            logger.exception("Generation result handler failed")

        with self._condition:
            next_request = self._pending if self._restart and not self._closed else None
            self._pending = None
            self._restart = False

            if next_request is None:
                self._state = GenerationState.IDLE
                self._condition.notify_all()
                return

            self._generations_started += 1

        self._start(next_request)
