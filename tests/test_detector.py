"""
Integration tests for CollisionDetectorImpl — the detection state machine.
Covers the end-to-end properties: known collision pair, distinct and identical inputs,
invalid and empty input, uninitialized model, state trails, statistics and thread safety.
"""
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest
from hashcollide.core.detector import CollisionDetectorImpl
from hashcollide.core.classifier import ClassifierImpl
from hashcollide.core.encoder import FeatureEncoderImpl
from hashcollide.core.hasher import DigestEngineImpl, XXH128AlgorithmImpl
from hashcollide.core.models import (
    DetectionResult, DetectionStats, ErrorKind, PipelineState, Verdict
)
from hashcollide.core.errors import (
    InvalidHexFormatError, EmptyInputError, ModelNotInitializedError
)
from hashcollide.samples import SAMPLE_DIGEST

SUCCESS_TRAIL = (
    PipelineState.IDLE,
    PipelineState.VALIDATING,
    PipelineState.HASHING,
    PipelineState.ENCODING,
    PipelineState.INFERRING,
    PipelineState.JUDGED,
)


class TestVerdicts:
    """End-to-end verdicts for representative message pairs."""

    def test_known_collision_pair_detected(self, detector, collision_pair):
        result = detector.detect(*collision_pair)

        assert result.ok
        verdict = result.verdict
        assert verdict.is_collision is True
        assert verdict.digest1 == verdict.digest2
        assert verdict.digest1.hex == SAMPLE_DIGEST
        assert 0.0 <= verdict.probability <= 1.0

    def test_distinct_non_colliding_inputs(self, detector):
        verdict = detector.detect("00", "ff").unwrap()
        assert verdict.is_collision is False
        assert verdict.digest1 != verdict.digest2
        assert len(verdict.digest1.hex) == len(verdict.digest2.hex) == 32

    def test_identical_inputs_are_not_a_collision(self, detector):
        verdict = detector.detect("ab12", "ab12").unwrap()
        assert verdict.is_collision is False
        assert verdict.digest1 == verdict.digest2

    def test_same_bytes_written_differently_are_not_a_collision(self, detector):
        """Equality is decided on decoded bytes, not on the raw text."""
        verdict = detector.detect("AB 12", "ab12").unwrap()
        assert verdict.is_collision is False

    def test_collision_pair_under_other_algorithm_is_not_a_collision(self, parameters, collision_pair):
        detector = CollisionDetectorImpl.with_parameters(
            parameters, engine=DigestEngineImpl(XXH128AlgorithmImpl())
        )
        verdict = detector.detect(*collision_pair).unwrap()
        assert verdict.is_collision is False
        assert verdict.digest1.algorithm == "xxh128"

    def test_verdict_to_dict(self, detector):
        data = detector.detect("00", "ff").unwrap().to_dict()
        assert set(data) == {"isCollision", "digest1", "digest2", "probability"}
        assert data["digest1"] == "93b885adfe0da089cdf634904fd59f71"
        assert data["digest2"] == "00594fd4f42ba43fc1ca0427a0576295"

    def test_repeated_runs_are_identical(self, detector, collision_pair):
        assert detector.detect(*collision_pair) == detector.detect(*collision_pair)


class TestFailures:
    """Every failure is terminal and reported as an error kind, never as a verdict."""

    def test_invalid_hex(self, detector):
        result = detector.detect("zz", "00")
        assert not result.ok
        assert result.verdict is None
        assert result.error == ErrorKind.INVALID_HEX_FORMAT
        assert "Invalid hex format" in result.message
        assert "Message 1" in result.message
        assert result.states == (PipelineState.IDLE, PipelineState.VALIDATING, PipelineState.FAILED)

    def test_odd_length_second_message(self, detector):
        result = detector.detect("00", "abc")
        assert result.error == ErrorKind.INVALID_HEX_FORMAT
        assert "Message 2" in result.message

    @pytest.mark.parametrize("message1, message2", [
        ("", "00"),
        ("00", ""),
        (None, "00"),
        ("00", None),
        ("   ", "00"),
        ("", ""),
    ])
    def test_empty_input(self, detector, message1, message2):
        result = detector.detect(message1, message2)
        assert result.error == ErrorKind.EMPTY_INPUT
        assert result.states == (PipelineState.IDLE, PipelineState.FAILED)

    def test_model_not_initialized(self):
        result = CollisionDetectorImpl().detect("00", "ff")
        assert result.error == ErrorKind.MODEL_NOT_INITIALIZED
        assert result.states == SUCCESS_TRAIL[:-1] + (PipelineState.FAILED,)

    @pytest.mark.parametrize("message1, message2, error_class", [
        ("zz", "00", InvalidHexFormatError),
        ("", "00", EmptyInputError),
    ])
    def test_unwrap_raises_matching_error(self, detector, message1, message2, error_class):
        with pytest.raises(error_class):
            detector.detect(message1, message2).unwrap()

    def test_unwrap_uninitialized_model(self):
        with pytest.raises(ModelNotInitializedError):
            CollisionDetectorImpl().detect("00", "ff").unwrap()

    def test_foreign_exceptions_propagate(self):
        """Only pipeline errors are translated; anything else reaches the caller unchanged."""
        class BrokenClassifier:
            def predict(self, features):
                raise ZeroDivisionError("boom")

        detector = CollisionDetectorImpl(classifier=BrokenClassifier())
        with pytest.raises(ZeroDivisionError):
            detector.detect("00", "ff")


class TestConstruction:
    """Collaborators are checked against each other when the detector is built."""

    def test_encoder_width_must_match_classifier(self, parameters):
        with pytest.raises(ValueError, match="expects 64"):
            CollisionDetectorImpl.with_parameters(parameters, encoder=FeatureEncoderImpl(bytes_per_message=4))

    def test_matching_custom_encoder_accepted(self, parameters):
        detector = CollisionDetectorImpl.with_parameters(parameters, encoder=FeatureEncoderImpl(32))
        assert detector.detect("00", "ff").ok

    def test_collaborators_without_width_are_not_checked(self, parameters):
        class FixedScore:
            def predict(self, features):
                return 0.5

        detector = CollisionDetectorImpl(classifier=FixedScore())
        assert detector.detect("00", "ff").unwrap().probability == 0.5


class TestStateMachine:
    """Test the state trail and progress reporting."""

    def test_success_trail(self, detector):
        result = detector.detect("00", "ff")
        assert result.states == SUCCESS_TRAIL
        assert result.final_state == PipelineState.JUDGED
        assert result.final_state.is_terminal

    def test_failure_final_state(self, detector):
        assert detector.detect("zz", "00").final_state == PipelineState.FAILED

    def test_progress_callback_invoked_per_stage(self, detector):
        calls = []

        def progress_callback(stage_name, current, total):
            calls.append((stage_name, current, total))

        detector.detect("00", "ff", progress_callback=progress_callback)
        assert [c[1] for c in calls] == [1, 2, 3, 4]
        assert all(c[2] == 4 for c in calls)
        assert calls[0][0] == PipelineState.VALIDATING.display_name
        assert calls[-1][0] == PipelineState.INFERRING.display_name

    def test_progress_stops_at_failing_stage(self, detector):
        calls = []
        detector.detect("zz", "00", progress_callback=lambda *args: calls.append(args))
        assert calls == []

    def test_stats_collected_per_stage(self, detector):
        stats = DetectionStats()
        events = []
        stats.add_listener(lambda stage, data: events.append((stage, dict(data))))

        detector.detect("0011", "ffeedd", stats=stats)

        assert list(stats.stage_stats) == ["validating", "hashing", "encoding", "inferring"]
        assert stats.stage_stats["validating"]["bytes"] == 10
        assert stats.stage_stats["hashing"]["bytes"] == 5
        assert stats.stage_stats["encoding"]["bytes"] == 64
        assert stats.total_time >= 0.0
        assert ("validating", {"status": "started"}) in events
        assert "Detection Statistics" in stats.print_summary()


class TestConcurrency:
    """One detector instance serves concurrent callers."""

    def test_concurrent_calls_match_sequential(self, detector, collision_pair):
        rng = np.random.default_rng(1)
        pairs = [collision_pair, ("00", "ff"), ("ab12", "ab12"), ("zz", "00")]
        pairs += [(rng.bytes(n).hex(), rng.bytes(n + 3).hex()) for n in range(1, 20)]

        sequential = [detector.detect(a, b) for a, b in pairs]
        with ThreadPoolExecutor(max_workers=8) as executor:
            concurrent = list(executor.map(lambda pair: detector.detect(*pair), pairs))

        assert concurrent == sequential

    def test_shared_classifier_parameters_untouched(self, detector, parameters):
        before = parameters.W1.copy()
        for _ in range(5):
            detector.detect("00", "ff")
        np.testing.assert_array_equal(parameters.W1, before)


class TestDetectionResult:
    """Test the result container itself."""

    def test_needs_exactly_one_outcome(self):
        with pytest.raises(ValueError):
            DetectionResult()

    def test_failure_to_dict(self, detector):
        data = detector.detect("zz", "00").to_dict()
        assert data["ok"] is False
        assert data["error"] == "InvalidHexFormat"

    def test_success_to_dict(self, detector):
        data = detector.detect("00", "ff").to_dict()
        assert data["ok"] is True
        assert data["isCollision"] is False

    def test_default_classifier_is_uninitialized(self):
        detector = CollisionDetectorImpl()
        assert isinstance(detector.classifier, ClassifierImpl)
        assert not detector.classifier.is_initialized

    def test_verdict_type(self, detector):
        assert isinstance(detector.detect("00", "ff").unwrap(), Verdict)
