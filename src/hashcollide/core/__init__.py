"""
Core collision-detection engine — codec, digest engine, encoder, classifier and pipeline orchestrator.

This package contains the whole detection pipeline:
- HexCodecImpl: whitespace- and case-insensitive hex decoding with strict validation
- DigestEngineImpl + MD5AlgorithmImpl: bit-exact RFC 1321 MD5 (XXH3-128 as an alternative)
- FeatureEncoderImpl: two messages → 64 normalized floats
- ClassifierImpl + ClassifierParameters: numpy feed-forward inference, immutable parameters
- CollisionJudgeImpl: digest equality + content inequality
- CollisionDetectorImpl: state-machine orchestrator (validate → hash → encode → infer → judge)

All components are pure Python/numpy with no UI dependencies, suitable for CLI and server usage.
"""

from .codec import HexCodecImpl
from .hasher import DigestEngineImpl, MD5AlgorithmImpl, XXH128AlgorithmImpl, ALGORITHMS, get_algorithm
from .encoder import FeatureEncoderImpl
from .classifier import ClassifierImpl, ClassifierParameters
from .judge import CollisionJudgeImpl
from .detector import CollisionDetectorImpl
from .config import DetectionConfig
from .errors import (
    CollisionDetectionError, EmptyInputError, InvalidHexFormatError,
    ModelNotInitializedError, ParameterShapeError, DetectionTimeoutError)
from .models import (
    Digest, Verdict, DetectionResult, DetectionStats, DetectionParams,
    PipelineState, ErrorKind)

__all__ = [
    "HexCodecImpl",
    "DigestEngineImpl",
    "MD5AlgorithmImpl",
    "XXH128AlgorithmImpl",
    "ALGORITHMS",
    "get_algorithm",
    "FeatureEncoderImpl",
    "ClassifierImpl",
    "ClassifierParameters",
    "CollisionJudgeImpl",
    "CollisionDetectorImpl",
    "DetectionConfig",
    "CollisionDetectionError",
    "EmptyInputError",
    "InvalidHexFormatError",
    "ModelNotInitializedError",
    "ParameterShapeError",
    "DetectionTimeoutError",
    "Digest",
    "Verdict",
    "DetectionResult",
    "DetectionStats",
    "DetectionParams",
    "PipelineState",
    "ErrorKind",
]
