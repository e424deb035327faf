"""
Unit tests for CollisionJudgeImpl.
The verdict depends only on digest equality and content inequality.
"""
import pytest
from hashcollide.core.judge import CollisionJudgeImpl
from hashcollide.core.models import Digest, Verdict

SAME = Digest(b"\x01" * 16)
OTHER = Digest(b"\x02" * 16)


class TestCollisionJudge:

    @pytest.mark.parametrize("bytes_a, bytes_b, digest_a, digest_b, expected", [
        (b"a", b"b", SAME, SAME, True),     # distinct content, equal digests
        (b"a", b"a", SAME, SAME, False),    # identical content is never a collision
        (b"a", b"b", SAME, OTHER, False),   # different digests
        (b"a", b"a", SAME, OTHER, False),
    ])
    def test_decision_rule(self, bytes_a, bytes_b, digest_a, digest_b, expected):
        verdict = CollisionJudgeImpl().judge(bytes_a, bytes_b, digest_a, digest_b, 0.5)
        assert verdict.is_collision is expected

    @pytest.mark.parametrize("probability", [0.0, 0.01, 0.99, 1.0])
    def test_probability_does_not_gate_verdict(self, probability):
        verdict = CollisionJudgeImpl().judge(b"a", b"b", SAME, SAME, probability)
        assert verdict.is_collision is True
        assert verdict.probability == probability

    def test_verdict_carries_both_digests(self):
        verdict = CollisionJudgeImpl().judge(b"a", b"b", SAME, OTHER, 0.25)
        assert isinstance(verdict, Verdict)
        assert verdict.digest1 is SAME
        assert verdict.digest2 is OTHER

    def test_verdict_is_immutable(self):
        verdict = CollisionJudgeImpl().judge(b"a", b"b", SAME, SAME, 0.25)
        with pytest.raises(AttributeError):
            verdict.is_collision = False
