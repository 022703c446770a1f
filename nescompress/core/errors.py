"""
NES Compress - Exceptions

Errors raised by the expression evaluator, the format catalog and the
decoder. Recoverable conditions (skipped out-of-bounds writes, truncated copy
sources) are not exceptions; they are recorded in DecodeStats.
"""


class NesCompressError(Exception):
    """Base class for all errors raised by nescompress."""

    pass


class MalformedExpressionError(NesCompressError):
    """Raised when a template expression cannot be parsed or evaluated."""

    pass


class UnknownFormatError(NesCompressError):
    """Raised when a format key is not in the catalog."""

    pass


class InvalidOperationError(NesCompressError):
    """
    Raised when the bytes at the decode cursor match no operation.

    The partially decoded PPU image is attached so the caller can still
    extract whatever was written before the failure.
    """

    def __init__(self, message: str, position: int, lookahead: tuple, ppu: bytearray):
        super().__init__(message)
        self.position = position
        self.lookahead = lookahead
        self.ppu = ppu
