"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/codec.py
Implements hex text validation and conversion to raw bytes.
"""

import re

from hashcollide.core.errors import InvalidHexFormatError
from hashcollide.core.interfaces import HexCodec

# Pre-compiled pattern (performance optimization)
_PATTERN_HEX = re.compile(r'[0-9a-fA-F]+')


class HexCodecImpl(HexCodec):
    """
    Case-insensitive, whitespace-insensitive hex codec.
    No other normalization is applied: a "0x" prefix is rejected like any other non-hex text.
    """

    @staticmethod
    def strip_whitespace(text: str) -> str:
        """Removes every whitespace character, including ones inside the text."""
        return "".join(text.split())

    def decode(self, text: str) -> bytes:
        """
        Converts hex text to bytes.

        Raises:
            InvalidHexFormatError: if the stripped text is empty, has odd length
                                   or contains a non-hex character.
        """
        if not isinstance(text, str):
            raise InvalidHexFormatError(f"Expected hex text, got {type(text).__name__}")

        clean = self.strip_whitespace(text)
        if not clean:
            raise InvalidHexFormatError("Hex text is empty")
        if not _PATTERN_HEX.fullmatch(clean):
            raise InvalidHexFormatError("Hex text contains non-hex characters")
        if len(clean) % 2:
            raise InvalidHexFormatError(f"Hex text has odd length ({len(clean)} digits)")

        return bytes.fromhex(clean)

    def encode(self, data: bytes) -> str:
        """Lowercase hex rendering; decode(encode(b)) == b for non-empty b."""
        return bytes(data).hex()
