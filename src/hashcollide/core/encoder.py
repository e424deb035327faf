"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/encoder.py
Maps a pair of messages to the fixed-length feature vector consumed by the classifier.
"""

import numpy as np

from hashcollide.core.interfaces import FeatureEncoder
from hashcollide.core.config import DetectionConfig


class FeatureEncoderImpl(FeatureEncoder):
    """
    Truncates or zero-pads each message to `bytes_per_message` bytes,
    maps every byte to [0, 1] and concatenates message 1 followed by message 2.
    """

    def __init__(self, bytes_per_message: int = DetectionConfig.BYTES_PER_MESSAGE):
        if bytes_per_message <= 0:
            raise ValueError("bytes_per_message must be positive")
        self.bytes_per_message = bytes_per_message

    @property
    def vector_size(self) -> int:
        return 2 * self.bytes_per_message

    def fit_bytes(self, data: bytes) -> bytes:
        """Truncate to the first N bytes, or right-pad with zero bytes."""
        data = bytes(data[:self.bytes_per_message])
        return data + b"\x00" * (self.bytes_per_message - len(data))

    def encode(self, first: bytes, second: bytes) -> np.ndarray:
        raw = self.fit_bytes(first) + self.fit_bytes(second)
        vector = np.frombuffer(raw, dtype=np.uint8).astype(np.float32) / 255.0
        vector.setflags(write=False)
        return vector
