"""
Unified command orchestrator for collision detection.
This is the SINGLE source of truth for wiring a detector from parameters, used by the CLI and library callers.
It is also the asynchronous boundary: the core pipeline stays synchronous and deterministic,
callers who want to wait with a timeout (or not wait at all) get a Future.
"""
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Dict, Optional, Callable, Tuple

from hashcollide.core.models import DetectionParams, DetectionResult, DetectionStats
from hashcollide.core.config import DetectionConfig
from hashcollide.core.errors import DetectionTimeoutError
from hashcollide.core.hasher import DigestEngineImpl, get_algorithm
from hashcollide.core.classifier import ClassifierImpl, ClassifierParameters
from hashcollide.core.detector import CollisionDetectorImpl

logger = logging.getLogger(__name__)


class DetectionCommand:
    """
    Orchestrates the detection workflow:
    1. Resolve classifier parameters (pre-loaded, weights file, or seeded random parameters)
    2. Build a detector for the requested digest algorithm
    3. Run detect() on a worker thread, optionally bounded by a timeout

    One command may serve many runs with different DetectionParams.

    Usage:
        params = DetectionParams(message1="00", message2="ff", seed=0)
        command = DetectionCommand()
        result, stats = command.execute(params)

        # Without blocking:
        future = command.submit(params)
        result = future.result()
    """

    def __init__(self, parameters: Optional[ClassifierParameters] = None):
        self.parameters: Optional[ClassifierParameters] = parameters
        self._loaded: Dict[Tuple[Optional[str], Optional[int]], ClassifierParameters] = {}
        self._lock = threading.Lock()
        self._executor = self._new_executor()

    @staticmethod
    def _new_executor() -> ThreadPoolExecutor:
        return ThreadPoolExecutor(max_workers=1, thread_name_prefix="hashcollide")

    def load_parameters(self, params: DetectionParams) -> ClassifierParameters:
        """
        Resolves classifier parameters for one run.
        Parameters given to the constructor win; otherwise a weights file, then a seed.
        Loaded parameters are memoised by (weights_path, seed).
        """
        if self.parameters is not None:
            return self.parameters

        seed = params.seed if params.seed is not None else DetectionConfig.DEFAULT_SEED
        key = (params.weights_path, None if params.weights_path else seed)
        with self._lock:
            if key not in self._loaded:
                if params.weights_path:
                    self._loaded[key] = ClassifierParameters.load(params.weights_path)
                else:
                    self._loaded[key] = ClassifierParameters.random(seed)
            return self._loaded[key]

    def build_detector(self, params: DetectionParams) -> CollisionDetectorImpl:
        engine = DigestEngineImpl(get_algorithm(params.algorithm), parallel=params.parallel_digests)
        classifier = ClassifierImpl(self.load_parameters(params))
        return CollisionDetectorImpl(classifier=classifier, engine=engine)

    def submit(
            self,
            params: DetectionParams,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None,
            stats: Optional[DetectionStats] = None
    ) -> 'Future[DetectionResult]':
        """Schedules a detection run and returns immediately."""
        detector = self.build_detector(params)
        with self._lock:
            return self._executor.submit(
                detector.detect,
                params.message1,
                params.message2,
                progress_callback,
                stats
            )

    def execute(
            self,
            params: DetectionParams,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None
    ) -> Tuple[DetectionResult, DetectionStats]:
        """
        Execute detection with given parameters and wait for the result.

        Args:
            params: Validated detection parameters
            progress_callback: (stage: str, current: int, total: Optional[int]) -> None

        Returns:
            Tuple of (detection_result, statistics)

        Raises:
            DetectionTimeoutError: If the run does not finish within params.timeout
            ParameterShapeError: If the weights file does not match the network layout
            OSError: If the weights file cannot be read
        """
        stats = DetectionStats()
        future = self.submit(params, progress_callback=progress_callback, stats=stats)
        try:
            result = future.result(timeout=params.timeout)
        except FutureTimeoutError:
            if not future.cancel():
                self._retire_executor()
            logger.error(f"Detection did not finish within {params.timeout}s")
            raise DetectionTimeoutError(f"Detection did not finish within {params.timeout} seconds") from None
        return result, stats

    def _retire_executor(self) -> None:
        """Leaves a still-running run on its old worker; later runs get a fresh one."""
        with self._lock:
            self._executor.shutdown(wait=False)
            self._executor = self._new_executor()

    def close(self) -> None:
        with self._lock:
            self._executor.shutdown(wait=False)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
