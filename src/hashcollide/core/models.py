"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models and domain logic for hex decoding, digesting and collision detection.
"""

from dataclasses import dataclass
from typing import List, Dict, Optional, Union, Callable, Any
from enum import Enum


# =============================
# Enums
# =============================

class PipelineState(Enum):
    """
    States of a single detection run.
    JUDGED and FAILED are terminal.
    """
    IDLE = "idle"
    VALIDATING = "validating"
    HASHING = "hashing"
    ENCODING = "encoding"
    INFERRING = "inferring"
    JUDGED = "judged"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (PipelineState.JUDGED, PipelineState.FAILED)

    @property
    def display_name(self) -> str:
        """Human-readable name for progress output."""
        mapping = {
            PipelineState.VALIDATING: "Hex validation",
            PipelineState.HASHING: "Digest computation",
            PipelineState.ENCODING: "Feature encoding",
            PipelineState.INFERRING: "Classifier inference",
            PipelineState.JUDGED: "Verdict",
            PipelineState.FAILED: "Failed",
        }
        return mapping.get(self, self.value.title())

    def __repr__(self) -> str:
        return self.value


class ErrorKind(Enum):
    """Terminal error kinds a detection run can end with."""
    EMPTY_INPUT = "EmptyInput"
    INVALID_HEX_FORMAT = "InvalidHexFormat"
    MODEL_NOT_INITIALIZED = "ModelNotInitialized"

    def __repr__(self) -> str:
        return self.value


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True)
class Digest:
    """
    Fixed-width digest of exactly one byte sequence.
    """
    value: bytes
    algorithm: str = "md5"

    def __post_init__(self):
        if not isinstance(self.value, bytes):
            raise ValueError("Digest value must be bytes")

    @property
    def hex(self) -> str:
        """Lowercase hex rendering (32 chars for 128-bit digests)."""
        return self.value.hex()

    @property
    def bit_length(self) -> int:
        return len(self.value) * 8

    def __str__(self):
        return self.hex

    def __repr__(self):
        return f"<Digest {self.algorithm}:{self.hex}>"


@dataclass(frozen=True)
class Verdict:
    """
    Final outcome of a successful detection run.
    The probability is auxiliary evidence and never gates is_collision.
    """
    is_collision: bool
    digest1: Digest
    digest2: Digest
    probability: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isCollision": self.is_collision,
            "digest1": self.digest1.hex,
            "digest2": self.digest2.hex,
            "probability": self.probability,
        }

    def __repr__(self):
        return (f"<Verdict collision={self.is_collision}, "
                f"digest1={self.digest1.hex}, digest2={self.digest2.hex}, "
                f"probability={self.probability:.4f}>")


@dataclass(frozen=True)
class DetectionResult:
    """
    Either a Verdict or a terminal error kind with its caller-facing message.
    `states` lists every pipeline state visited, IDLE first.
    """
    verdict: Optional[Verdict] = None
    error: Optional[ErrorKind] = None
    message: str = ""
    states: tuple = ()

    def __post_init__(self):
        if (self.verdict is None) == (self.error is None):
            raise ValueError("DetectionResult needs exactly one of verdict or error")

    @property
    def ok(self) -> bool:
        return self.verdict is not None

    @property
    def final_state(self) -> PipelineState:
        return PipelineState.JUDGED if self.ok else PipelineState.FAILED

    @classmethod
    def success(cls, verdict: Verdict, states: List[PipelineState]) -> 'DetectionResult':
        return cls(verdict=verdict, states=tuple(states))

    @classmethod
    def failure(cls, kind: ErrorKind, message: str, states: List[PipelineState]) -> 'DetectionResult':
        return cls(error=kind, message=message, states=tuple(states))

    def unwrap(self) -> Verdict:
        """Returns the verdict or raises the error this run failed with."""
        if self.verdict is not None:
            return self.verdict
        # Local import: errors depends on this module
        from hashcollide.core.errors import error_for_kind
        raise error_for_kind(self.error, self.message)

    def to_dict(self) -> Dict[str, Any]:
        if self.verdict is not None:
            return {"ok": True, **self.verdict.to_dict()}
        return {"ok": False, "error": self.error.value, "message": self.message}

    def __repr__(self):
        if self.ok:
            return f"<DetectionResult ok {self.verdict!r}>"
        return f"<DetectionResult failed {self.error.value}: {self.message}>"


@dataclass
class DetectionStats:
    """
    Statistics collected during a single detection run.
    """
    def __init__(self):
        self.total_time: float = 0.0
        self.stage_stats: Dict[str, Dict[str, Union[int, float]]] = {}
        self._listeners: List[Callable[[str, Dict], None]] = []

    def add_listener(self, listener: Callable[[str, Dict], None]):
        """Adds a listener to receive updates when stats are updated."""
        self._listeners.append(listener)

    def update_stage(
            self,
            stage_name: str,
            bytes_processed: int,
            duration: float
    ) -> None:
        if stage_name not in self.stage_stats:
            self.stage_stats[stage_name] = {
                "bytes": 0,
                "time": 0.0
            }
        self.stage_stats[stage_name]["bytes"] += bytes_processed
        self.stage_stats[stage_name]["time"] += duration

        for listener in self._listeners:
            listener(stage_name, self.stage_stats[stage_name])

    def notify_stage_start(self, stage_name: str):
        """Notifies listeners that a new stage has started."""
        for listener in self._listeners:
            listener(stage_name, {"status": "started"})

    def print_summary(self) -> str:
        labels = {
            "validating": "🔎 Hex Validation",
            "hashing": "🔐 Digest Computation",
            "encoding": "🧮 Feature Encoding",
            "inferring": "🧠 Classifier Inference",
        }

        lines = [
            "📊 Detection Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s\n",
            "Stage: BYTES / TIME"
        ]

        for stage, data in self.stage_stats.items():
            label = labels.get(stage.lower(), stage.title())
            lines.append(f"{label}: {data['bytes']} / {data['time']:.6f}s")

        return "\n".join(lines)


"""
DTO for detection parameters with built-in validation.
Interface-agnostic, used by the CLI and by library callers.
"""

@dataclass
class DetectionParams:
    """Parameters for a detection operation with validation."""
    message1: str
    message2: str
    algorithm: str = "md5"
    weights_path: Optional[str] = None
    seed: Optional[int] = None
    timeout: Optional[float] = None
    parallel_digests: bool = False

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        self.algorithm = (self.algorithm or "").strip().lower()
        if not self.algorithm:
            raise ValueError("Digest algorithm cannot be empty")

        # Local import: hasher depends on this module
        from hashcollide.core.hasher import ALGORITHMS
        if self.algorithm not in ALGORITHMS:
            raise ValueError(
                f"Unknown digest algorithm: '{self.algorithm}'. "
                f"Valid options: {', '.join(sorted(ALGORITHMS))}"
            )

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("Timeout must be a positive number of seconds")

        if self.seed is not None and self.seed < 0:
            raise ValueError("Seed cannot be negative")

        if self.weights_path is not None and self.seed is not None:
            raise ValueError("Use either a weights file or a seed, not both")

    @staticmethod
    def from_cli_values(
            message1: str,
            message2: str,
            algorithm: str = "md5",
            weights_path: Optional[str] = None,
            seed: Optional[int] = None,
            timeout: Optional[float] = None,
            parallel_digests: bool = False,
    ) -> 'DetectionParams':
        """
        Factory method to create params from raw CLI values.
        Empty strings for optional values are treated as "not given".
        """
        return DetectionParams(
            message1=message1,
            message2=message2,
            algorithm=algorithm,
            weights_path=weights_path or None,
            seed=seed,
            timeout=timeout or None,
            parallel_digests=parallel_digests,
        )
