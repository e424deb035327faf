"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

detector.py
Implements the collision-detection pipeline as a small state machine:
    IDLE → VALIDATING → HASHING → ENCODING → INFERRING → JUDGED
Any state may end in FAILED. Failures are terminal per call and never retried:
every stage is deterministic, so repeating it with the same input cannot change the outcome.
"""
import time
import logging
from typing import List, Optional, Callable

from hashcollide.core.models import DetectionResult, DetectionStats, PipelineState
from hashcollide.core.errors import CollisionDetectionError, EmptyInputError, ERROR_MESSAGES
from hashcollide.core.interfaces import (
    CollisionDetector, HexCodec, DigestEngine, FeatureEncoder, Classifier, CollisionJudge, PipelineStage
)
from hashcollide.core.codec import HexCodecImpl
from hashcollide.core.hasher import DigestEngineImpl
from hashcollide.core.encoder import FeatureEncoderImpl
from hashcollide.core.classifier import ClassifierImpl, ClassifierParameters
from hashcollide.core.judge import CollisionJudgeImpl
from hashcollide.core.stages import (
    DetectionContext, ValidationStage, HashingStage, EncodingStage, InferenceStage
)

logger = logging.getLogger(__name__)


# =============================
# Main Detector Class
# =============================
class CollisionDetectorImpl(CollisionDetector):
    """
    Runs two hex messages through validation, hashing, encoding and inference,
    then applies the collision rule.

    Holds only its collaborators; all per-call data lives in a DetectionContext,
    so a single instance can be shared between threads.
    A detector built without classifier parameters fails every run with ModelNotInitialized.
    """

    def __init__(
        self,
        classifier: Optional[Classifier] = None,
        engine: Optional[DigestEngine] = None,
        codec: Optional[HexCodec] = None,
        encoder: Optional[FeatureEncoder] = None,
        judge: Optional[CollisionJudge] = None
    ):
        self.classifier = classifier or ClassifierImpl()
        self.engine = engine or DigestEngineImpl()
        self.codec = codec or HexCodecImpl()
        self.encoder = encoder or FeatureEncoderImpl()
        self.judge = judge or CollisionJudgeImpl()
        self._check_widths()
        self._pipeline = self._build_pipeline()

    @classmethod
    def with_parameters(cls, parameters: ClassifierParameters, **kwargs) -> 'CollisionDetectorImpl':
        """Detector whose classifier uses the given parameters."""
        return cls(classifier=ClassifierImpl(parameters), **kwargs)

    def detect(
        self,
        message1: Optional[str],
        message2: Optional[str],
        progress_callback: Optional[Callable[[str, int, object], None]] = None,
        stats: Optional[DetectionStats] = None
    ) -> DetectionResult:
        """
        Main detection pipeline.
        Args:
            message1: First message as hex text
            message2: Second message as hex text
            progress_callback (Optional[Callable[[str, int, int], None]]): Reports progress per stage.
            stats: Optional DetectionStats to fill with per-stage timings.
        Returns:
            DetectionResult with a Verdict, or with the error kind and a caller-facing message.
        """
        stats = stats if stats is not None else DetectionStats()
        context = DetectionContext(message1=message1, message2=message2)
        total_start_time = time.time()

        try:
            self._require_messages(context)

            total_stages = len(self._pipeline)
            for index, stage in enumerate(self._pipeline, start=1):
                context.transition(stage.state)
                logger.debug(f"Entering stage: {stage.get_stage_name()}")
                stats.notify_stage_start(stage.state.value)

                start_time = time.time()
                processed = stage.process(context)
                stats.update_stage(stage.state.value, processed, time.time() - start_time)

                if progress_callback:
                    progress_callback(stage.get_stage_name(), index, total_stages)

            context.verdict = self.judge.judge(
                context.bytes1, context.bytes2,
                context.digest1, context.digest2,
                context.probability
            )
            context.transition(PipelineState.JUDGED)
        except CollisionDetectionError as e:
            failed_in = context.state
            context.transition(PipelineState.FAILED)
            message = self._format_error(e)
            logger.error(f"Detection failed in state '{failed_in.value}': {message}")
            return DetectionResult.failure(e.kind, message, context.states)
        finally:
            stats.total_time = time.time() - total_start_time

        logger.debug(f"Detection finished: {context.verdict!r}")
        return DetectionResult.success(context.verdict, context.states)

    def _build_pipeline(self) -> List[PipelineStage]:
        """Builds the stage sequence, one stage per non-terminal state after IDLE."""
        return [
            ValidationStage(self.codec),
            HashingStage(self.engine),
            EncodingStage(self.encoder),
            InferenceStage(self.classifier),
        ]

    def _check_widths(self) -> None:
        """Encoder output and classifier input must agree before any run starts."""
        produced = getattr(self.encoder, "vector_size", None)
        expected = getattr(self.classifier, "input_size", None)
        if produced is not None and expected is not None and produced != expected:
            raise ValueError(
                f"Encoder produces {produced} features but the classifier expects {expected}"
            )

    @staticmethod
    def _require_messages(context: DetectionContext) -> None:
        """IDLE → VALIDATING needs two non-blank messages."""
        missing = [
            str(index) for index, text in enumerate((context.message1, context.message2), start=1)
            if text is None or not str(text).strip()
        ]
        if missing:
            raise EmptyInputError(f"Missing message {' and '.join(missing)}")

    @staticmethod
    def _format_error(error: CollisionDetectionError) -> str:
        """Single translation point from an error kind to the message shown to callers."""
        base = ERROR_MESSAGES[error.kind]
        detail = str(error)
        if detail and detail != base:
            return f"{base} ({detail})"
        return base
