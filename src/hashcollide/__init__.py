"""
hashcollide — decide whether two hex messages are a hash collision pair.

Core features:
- Strict hex decoding (case- and whitespace-insensitive)
- Bit-exact pure-Python MD5, with XXH3-128 as an alternative 128-bit digest
- Small numpy feed-forward classifier scoring the pair (inference only)
- State-machine pipeline returning a verdict or a single terminal error
- CLI interface with text or JSON output
"""

# Get version
try:
    from importlib.metadata import version as _version
    __version__ = _version("hashcollide")
except Exception:
    try:
        import tomllib  # Python 3.11+
    except ImportError:
        import tomli as tomllib  # Python < 3.11: pip install tomli
    from pathlib import Path as _Path

    with open(_Path(__file__).resolve().parents[2] / "pyproject.toml", "rb") as f:
        __version__ = tomllib.load(f)["project"]["version"]

# Public API: only what users should import directly
from hashcollide.commands import DetectionCommand
from hashcollide.core import (
    CollisionDetectorImpl, ClassifierParameters, DetectionParams, DetectionResult,
    Verdict, Digest, ErrorKind, PipelineState, CollisionDetectionError)
from hashcollide.samples import SAMPLE_MESSAGE_1, SAMPLE_MESSAGE_2


def detect(message1: str, message2: str, parameters: ClassifierParameters = None) -> DetectionResult:
    """
    One-shot detection with default components.
    Without explicit parameters the classifier uses seeded random (untrained) weights.
    """
    if parameters is None:
        parameters = ClassifierParameters.random()
    return CollisionDetectorImpl.with_parameters(parameters).detect(message1, message2)


__all__ = [
    "detect",
    "DetectionCommand",
    "CollisionDetectorImpl",
    "ClassifierParameters",
    "DetectionParams",
    "DetectionResult",
    "Verdict",
    "Digest",
    "ErrorKind",
    "PipelineState",
    "CollisionDetectionError",
    "SAMPLE_MESSAGE_1",
    "SAMPLE_MESSAGE_2",
    "__version__",
]
