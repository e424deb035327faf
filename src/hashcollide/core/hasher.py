"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements 128-bit message digests using pluggable hash algorithms.

MD5AlgorithmImpl is a self-contained RFC 1321 implementation and must match
any reference MD5 bit for bit.
The DigestEngineImpl class wraps any algorithm and returns Digest objects.
"""

import math
import struct
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Optional, Tuple, Type

import xxhash

from hashcollide.core.models import Digest
from hashcollide.core.interfaces import DigestEngine, HashAlgorithm

logger = logging.getLogger(__name__)

_MASK32 = 0xFFFFFFFF

# Per-operation left-rotation amounts, four rounds of 16
_SHIFTS = (
    [7, 12, 17, 22] * 4 +
    [5, 9, 14, 20] * 4 +
    [4, 11, 16, 23] * 4 +
    [6, 10, 15, 21] * 4
)

# K[i] = floor(|sin(i + 1)| * 2^32)
_CONSTANTS = [int(abs(math.sin(i + 1)) * 2 ** 32) & _MASK32 for i in range(64)]

_INITIAL_STATE = (0x67452301, 0xEFCDAB89, 0x98BADCFE, 0x10325476)


def _rotate_left(value: int, amount: int) -> int:
    return ((value << amount) | (value >> (32 - amount))) & _MASK32


class MD5AlgorithmImpl(HashAlgorithm):
    """Pure-Python MD5 (RFC 1321). 16-byte output."""
    name = "md5"
    digest_size = 16

    @staticmethod
    def pad(data: bytes) -> bytes:
        """
        Appends a single 1 bit, zero bits up to 448 mod 512,
        then the original bit length as a 64-bit little-endian integer.
        """
        bit_length = (len(data) * 8) & 0xFFFFFFFFFFFFFFFF
        padding = b"\x80" + b"\x00" * ((55 - len(data)) % 64)
        return data + padding + struct.pack("<Q", bit_length)

    @staticmethod
    def compress(state: Tuple[int, int, int, int], block: bytes) -> Tuple[int, int, int, int]:
        """Processes one 512-bit block and returns the updated state."""
        words = struct.unpack("<16I", block)
        a, b, c, d = state

        for i in range(64):
            if i < 16:
                f = (b & c) | (~b & d)
                g = i
            elif i < 32:
                f = (d & b) | (~d & c)
                g = (5 * i + 1) % 16
            elif i < 48:
                f = b ^ c ^ d
                g = (3 * i + 5) % 16
            else:
                f = c ^ (b | ~d)
                g = (7 * i) % 16

            f = (f + a + _CONSTANTS[i] + words[g]) & _MASK32
            a, d, c = d, c, b
            b = (b + _rotate_left(f, _SHIFTS[i])) & _MASK32

        return (
            (state[0] + a) & _MASK32,
            (state[1] + b) & _MASK32,
            (state[2] + c) & _MASK32,
            (state[3] + d) & _MASK32,
        )

    @staticmethod
    def hash(data: bytes) -> bytes:
        message = MD5AlgorithmImpl.pad(bytes(data))
        state = _INITIAL_STATE
        for offset in range(0, len(message), 64):
            state = MD5AlgorithmImpl.compress(state, message[offset:offset + 64])
        return struct.pack("<4I", *state)


# Use the same way to implement and use any other hashing algorithm
class XXH128AlgorithmImpl(HashAlgorithm):
    """XXH3 128-bit variant from xxhash. Not cryptographic."""
    name = "xxh128"
    digest_size = 16

    @staticmethod
    def hash(data: bytes) -> bytes:
        return xxhash.xxh3_128(data).digest()


ALGORITHMS: Dict[str, Type[HashAlgorithm]] = {
    MD5AlgorithmImpl.name: MD5AlgorithmImpl,
    XXH128AlgorithmImpl.name: XXH128AlgorithmImpl,
}


def get_algorithm(name: str) -> HashAlgorithm:
    """Looks up an algorithm by name ("md5", "xxh128")."""
    try:
        return ALGORITHMS[name.lower()]()
    except KeyError:
        raise ValueError(
            f"Unknown digest algorithm: '{name}'. Valid options: {', '.join(sorted(ALGORITHMS))}"
        ) from None


class DigestEngineImpl(DigestEngine):
    """
    A digest engine that supports any algorithm via the HashAlgorithm interface.
    Holds no mutable state, so one instance can serve concurrent callers.
    """

    def __init__(self, algorithm: Optional[HashAlgorithm] = None, parallel: bool = False):
        self.algorithm = algorithm or MD5AlgorithmImpl()
        self.parallel = parallel

    def hash(self, data: bytes) -> Digest:
        return Digest(value=self.algorithm.hash(bytes(data)), algorithm=self.algorithm.name)

    def hash_pair(self, first: bytes, second: bytes) -> Tuple[Digest, Digest]:
        """
        Computes both digests of a detection run.
        With parallel=True the two digests are computed on separate threads;
        the inputs are immutable so the result is the same either way.
        """
        if not self.parallel:
            return self.hash(first), self.hash(second)

        logger.debug(f"Computing digests in parallel with {self.algorithm.name}")
        with ThreadPoolExecutor(max_workers=2) as executor:
            future_first = executor.submit(self.hash, first)
            future_second = executor.submit(self.hash, second)
            return future_first.result(), future_second.result()
