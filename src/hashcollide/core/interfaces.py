"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the collision-detection pipeline.
These protocols enforce structural typing using Python's `typing.Protocol` to ensure
consistency across modules while maintaining flexibility and modularity.

Key Components:
---------------
- HexCodec: Interface for validating and converting hex text to bytes.
- HashAlgorithm: Standardized interface for 128-bit hash functions (MD5, XXH3-128).
- DigestEngine: Interface for producing Digest objects from byte sequences.
- FeatureEncoder: Interface for turning two messages into one feature vector.
- Classifier: Interface for scoring a feature vector.
- CollisionJudge: Interface for the final verdict rule.
- PipelineStage: Interface for individual stages of the detection pipeline.
- CollisionDetector: Interface for the orchestrator coordinating all stages.
"""

from typing import Protocol, Optional, Callable, Tuple

import numpy as np

from hashcollide.core.models import (
    Digest,
    Verdict,
    DetectionResult,
    PipelineState,
)


# ===== Interfaces =====

class HexCodec(Protocol):
    """Interface for hex text <-> bytes conversion."""
    def decode(self, text: str) -> bytes: ...
    def encode(self, data: bytes) -> str: ...


class HashAlgorithm(Protocol):
    """
    Interface for generic hash algorithms.

    Allows plugging in different 128-bit hashing functions like MD5 or XXH3-128
    without affecting the rest of the detection logic.
    """
    name: str

    @staticmethod
    def hash(data: bytes) -> bytes:
        """Computes the hash of the provided byte data."""
        ...


class DigestEngine(Protocol):
    """Interface for computing digests of one or two byte sequences."""
    def hash(self, data: bytes) -> Digest: ...
    def hash_pair(self, first: bytes, second: bytes) -> Tuple[Digest, Digest]: ...


class FeatureEncoder(Protocol):
    """
    Interface for mapping two byte sequences to a fixed-length vector
    of floats in [0, 1].
    """
    def encode(self, first: bytes, second: bytes) -> np.ndarray: ...


class Classifier(Protocol):
    """Interface for feed-forward inference over a feature vector."""
    def predict(self, features: np.ndarray) -> float:
        """Returns the collision probability in [0, 1]."""
        ...


class CollisionJudge(Protocol):
    """Interface for combining digests, inputs and score into a Verdict."""
    def judge(
        self,
        bytes_a: bytes,
        bytes_b: bytes,
        digest_a: Digest,
        digest_b: Digest,
        probability: float
    ) -> Verdict: ...


# =============================
# Stage Interfaces
# =============================

class PipelineStage(Protocol):
    """
    Interface for one step of the detection pipeline.

    Each implementation owns exactly one non-terminal pipeline state and
    fills its part of the per-call context.
    """
    state: PipelineState

    def get_stage_name(self) -> str:
        """Return the name of this stage (used in logging and stats)."""
        ...

    def process(self, context) -> int:
        """
        Run this stage against a DetectionContext.
        Returns the number of bytes (or characters) the stage handled, for statistics.

        Raises:
            CollisionDetectionError: on a terminal pipeline failure.
        """
        ...


class CollisionDetector(Protocol):
    """
    Interface for the main detection engine.

    Coordinates validation → hashing → encoding → inference → verdict.
    """
    def detect(
        self,
        message1: Optional[str],
        message2: Optional[str],
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> DetectionResult:
        """
        Run the full detection pipeline on two hex messages.

        Args:
            message1: First message as hex text.
            message2: Second message as hex text.
            progress_callback: Optional callback for progress updates (stage, current, total).

        Returns:
            DetectionResult holding a Verdict or a terminal error kind.
        """
        ...
