"""
Unit tests for FeatureEncoderImpl.
Verifies truncation, zero padding, normalization and message order.
"""
import numpy as np
import pytest
from hashcollide.core.encoder import FeatureEncoderImpl
from hashcollide.core.config import DetectionConfig


class TestFeatureEncoding:
    """Test the fixed 64-value layout."""

    def test_vector_has_64_values_in_unit_range(self):
        vector = FeatureEncoderImpl().encode(b"\x01\x02", b"\xff" * 50)
        assert vector.shape == (DetectionConfig.FEATURE_SIZE,) == (64,)
        assert vector.dtype == np.float32
        assert np.all(vector >= 0.0) and np.all(vector <= 1.0)

    def test_long_message_truncated_to_32_bytes(self):
        """A 40-byte message keeps only its first 32 bytes."""
        first = bytes(range(1, 41))
        vector = FeatureEncoderImpl().encode(first, b"")
        expected = np.array(range(1, 33), dtype=np.float32) / 255.0
        np.testing.assert_allclose(vector[:32], expected)

    def test_short_message_zero_padded_to_32_bytes(self):
        """A 10-byte message is followed by 22 zeros in its half."""
        second = b"\xff" * 10
        vector = FeatureEncoderImpl().encode(b"", second)
        assert np.all(vector[32:42] == 1.0)
        assert np.all(vector[42:] == 0.0)

    def test_empty_messages_yield_all_zeros(self):
        vector = FeatureEncoderImpl().encode(b"", b"")
        assert vector.shape == (64,)
        assert not vector.any()

    def test_message_one_comes_first(self):
        vector = FeatureEncoderImpl().encode(b"\xff", b"\x00")
        assert vector[0] == 1.0
        assert vector[32] == 0.0

    def test_normalization_divides_by_255(self):
        vector = FeatureEncoderImpl().encode(b"\x80", b"\x33")
        assert vector[0] == pytest.approx(128 / 255.0)
        assert vector[32] == pytest.approx(0x33 / 255.0)

    def test_encoding_is_deterministic(self):
        encoder = FeatureEncoderImpl()
        np.testing.assert_array_equal(encoder.encode(b"abc", b"xyz"), encoder.encode(b"abc", b"xyz"))

    def test_vector_is_read_only(self):
        vector = FeatureEncoderImpl().encode(b"a", b"b")
        with pytest.raises(ValueError):
            vector[0] = 0.5

    def test_custom_width(self):
        encoder = FeatureEncoderImpl(bytes_per_message=4)
        assert encoder.vector_size == 8
        assert encoder.encode(b"\x01" * 10, b"").shape == (8,)

    def test_non_positive_width_rejected(self):
        with pytest.raises(ValueError):
            FeatureEncoderImpl(bytes_per_message=0)
