"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/judge.py
Final collision verdict.
"""

from hashcollide.core.models import Digest, Verdict
from hashcollide.core.interfaces import CollisionJudge


class CollisionJudgeImpl(CollisionJudge):
    """
    A pair is a collision when the digests match and the contents differ.
    Identical messages share a digest but are never a collision.
    The classifier probability is passed through for display only and does not gate the verdict.
    """

    def judge(
        self,
        bytes_a: bytes,
        bytes_b: bytes,
        digest_a: Digest,
        digest_b: Digest,
        probability: float
    ) -> Verdict:
        is_collision = (digest_a == digest_b) and (bytes(bytes_a) != bytes(bytes_b))
        return Verdict(
            is_collision=is_collision,
            digest1=digest_a,
            digest2=digest_b,
            probability=float(probability),
        )
