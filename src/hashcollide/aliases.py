ALGORITHM_ALIASES = {
    "md5": "md5",
    "xxh128": "xxh128",
    "xxh3": "xxh128",
}

ALGORITHM_CHOICES = list(ALGORITHM_ALIASES.keys())

ALGORITHM_HELP_TEXT = (
    "128-bit digest algorithm used to compare the messages:\n"
    "  md5    : RFC 1321 MD5 (default; known collision pairs exist)\n"
    "  xxh128 : XXH3 128-bit (non-cryptographic, alias: xxh3)\n"
)

# Exit codes
EXIT_OK = 0
EXIT_ERROR = 1
EXIT_COLLISION = 2

EPILOG_TEXT = """
Examples:
  Compare two messages given as hex
  %(prog)s 00 ff

  Whitespace inside the hex text is ignored
  %(prog)s "de ad be ef" "DEADBEEF"

  Check the built-in published MD5 collision pair
  %(prog)s --sample

  Machine-readable output, classifier weights loaded from a file
  %(prog)s --sample --weights model.npz --json

  Exit codes: 0 = no collision, 2 = collision detected, 1 = error
"""
