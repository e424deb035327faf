"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/stages.py
Per-call detection context and the individual pipeline stages.
Each stage owns one non-terminal pipeline state and fills its part of the context.
"""
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional

import numpy as np

from hashcollide.core.models import Digest, PipelineState, Verdict
from hashcollide.core.errors import InvalidHexFormatError
from hashcollide.core.interfaces import (
    HexCodec, DigestEngine, FeatureEncoder, Classifier, PipelineStage
)


#=============================
# State machine
#=============================
TRANSITIONS: Dict[PipelineState, FrozenSet[PipelineState]] = {
    PipelineState.IDLE: frozenset({PipelineState.VALIDATING, PipelineState.FAILED}),
    PipelineState.VALIDATING: frozenset({PipelineState.HASHING, PipelineState.FAILED}),
    PipelineState.HASHING: frozenset({PipelineState.ENCODING, PipelineState.FAILED}),
    PipelineState.ENCODING: frozenset({PipelineState.INFERRING, PipelineState.FAILED}),
    PipelineState.INFERRING: frozenset({PipelineState.JUDGED, PipelineState.FAILED}),
    PipelineState.JUDGED: frozenset(),
    PipelineState.FAILED: frozenset(),
}


@dataclass
class DetectionContext:
    """
    Everything produced during one detection run.
    Created by the detector for a single call and discarded afterwards.
    """
    message1: Optional[str]
    message2: Optional[str]
    bytes1: Optional[bytes] = None
    bytes2: Optional[bytes] = None
    digest1: Optional[Digest] = None
    digest2: Optional[Digest] = None
    features: Optional[np.ndarray] = None
    probability: Optional[float] = None
    verdict: Optional[Verdict] = None
    state: PipelineState = PipelineState.IDLE
    states: List[PipelineState] = field(default_factory=lambda: [PipelineState.IDLE])

    def transition(self, new_state: PipelineState) -> None:
        """Moves to new_state, rejecting transitions the state machine does not allow."""
        if new_state not in TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal pipeline transition: {self.state.value} → {new_state.value}")
        self.state = new_state
        self.states.append(new_state)


# =============================
# Individual Stages
# =============================
class ValidationStage(PipelineStage):
    state = PipelineState.VALIDATING

    def __init__(self, codec: HexCodec):
        self.codec = codec

    def get_stage_name(self) -> str:
        return self.state.display_name

    def process(self, context: DetectionContext) -> int:
        """Decodes both messages. Returns the number of hex characters read."""
        decoded = []
        for index, text in enumerate((context.message1, context.message2), start=1):
            try:
                decoded.append(self.codec.decode(text))
            except InvalidHexFormatError as e:
                raise InvalidHexFormatError(f"Message {index}: {e}") from e
        context.bytes1, context.bytes2 = decoded
        return len(context.message1) + len(context.message2)


class HashingStage(PipelineStage):
    state = PipelineState.HASHING

    def __init__(self, engine: DigestEngine):
        self.engine = engine

    def get_stage_name(self) -> str:
        return self.state.display_name

    def process(self, context: DetectionContext) -> int:
        context.digest1, context.digest2 = self.engine.hash_pair(context.bytes1, context.bytes2)
        return len(context.bytes1) + len(context.bytes2)


class EncodingStage(PipelineStage):
    state = PipelineState.ENCODING

    def __init__(self, encoder: FeatureEncoder):
        self.encoder = encoder

    def get_stage_name(self) -> str:
        return self.state.display_name

    def process(self, context: DetectionContext) -> int:
        context.features = self.encoder.encode(context.bytes1, context.bytes2)
        return int(context.features.size)


class InferenceStage(PipelineStage):
    state = PipelineState.INFERRING

    def __init__(self, classifier: Classifier):
        self.classifier = classifier

    def get_stage_name(self) -> str:
        return self.state.display_name

    def process(self, context: DetectionContext) -> int:
        context.probability = self.classifier.predict(context.features)
        return int(context.features.nbytes)
