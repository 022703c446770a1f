"""
NES Compress - Compression

Greedy run-length encoders. Each encoder is the inverse of exactly one decode
table in formats.py; the record layouts below must stay in sync with it.
"""

from .errors import UnknownFormatError
from .ppu import DEFAULT_PPU_ADDRESS, PPU_SIZE

# Runs shorter than this are cheaper as literals
MIN_RUN = 3

# Konami: 7F is the address opcode, so repeat counts stop at 7E.
# Copy records are 80+n, also capped at 7E bytes so 0xFF stays the end marker.
KONAMI_MAX_RUN = 0x7E
KONAMI_MAX_COPY = 0x7E
KONAMI_COPY_BASE = 0x80
KONAMI_END = 0xFF

# Kemko: FF value count. A count of 0 is the end marker.
KEMKO_MARKER = 0xFF
KEMKO_MAX_RUN = 0xFF
KEMKO_END = bytes([0xFF, 0xFF, 0x00])


def run_length(data: bytes, start: int, cap: int) -> int:
    """
    Count how many times data[start] repeats from start onwards.

    Args:
        data: Buffer to scan
        start: Index of the first byte of the run
        cap: Maximum run length to report

    Returns:
        Run length, between 1 and cap
    """
    value = data[start]
    count = 1
    while count < cap and start + count < len(data) and data[start + count] == value:
        count += 1
    return count


def compress_konami_rle(
    data: bytes, ppu_address: int = DEFAULT_PPU_ADDRESS, address_header: bool = True
) -> bytes:
    """
    Compress data with Konami RLE.

    With the address header the output is a "konami2" (Life Force) stream.
    Without it the output is a plain "konami" stream, which always decodes
    to $2000.

    Args:
        data: Uncompressed bytes (e.g., a 1024-byte nametable)
        ppu_address: Target PPU address written in the header
        address_header: Emit the 2-byte little-endian address header

    Returns:
        Compressed stream, terminated with FF
    """
    if not 0 <= ppu_address < PPU_SIZE:
        raise ValueError(f"PPU address ${ppu_address:04X} out of range")

    output = bytearray()
    if address_header:
        output.append(ppu_address & 0xFF)
        output.append(ppu_address >> 8)

    i = 0
    while i < len(data):
        run = run_length(data, i, KONAMI_MAX_RUN)
        if run >= MIN_RUN:
            output.append(run)
            output.append(data[i])
            i += run
            continue

        # Literal run up to the next repeat worth encoding
        literal = bytearray()
        while (
            i < len(data)
            and len(literal) < KONAMI_MAX_COPY
            and run_length(data, i, MIN_RUN) < MIN_RUN
        ):
            literal.append(data[i])
            i += 1
        output.append(KONAMI_COPY_BASE + len(literal))
        output.extend(literal)

    output.append(KONAMI_END)
    return bytes(output)


def compress_kemko_rle(data: bytes, ppu_address: int = DEFAULT_PPU_ADDRESS) -> bytes:
    """
    Compress data with Kemko RLE.

    The format has no address field; streams always decode to $2000.

    Args:
        data: Uncompressed bytes
        ppu_address: Must be $2000

    Returns:
        Compressed stream, terminated with FF FF 00

    Raises:
        ValueError: If ppu_address is not $2000
    """
    if ppu_address != DEFAULT_PPU_ADDRESS:
        raise ValueError(
            f"Kemko RLE always decodes to ${DEFAULT_PPU_ADDRESS:04X}, "
            f"cannot target ${ppu_address:04X}"
        )

    output = bytearray()
    i = 0
    while i < len(data):
        value = data[i]
        run = run_length(data, i, KEMKO_MAX_RUN)
        if run >= MIN_RUN or value == KEMKO_MARKER:
            # FF is the marker byte, so even a single FF goes through a repeat
            output.append(KEMKO_MARKER)
            output.append(value)
            output.append(run)
            i += run
            continue

        while (
            i < len(data)
            and data[i] != KEMKO_MARKER
            and run_length(data, i, MIN_RUN) < MIN_RUN
        ):
            output.append(data[i])
            i += 1

    output.extend(KEMKO_END)
    return bytes(output)


def _compress_konami_plain(data: bytes, ppu_address: int = DEFAULT_PPU_ADDRESS) -> bytes:
    if ppu_address != DEFAULT_PPU_ADDRESS:
        raise ValueError(
            f"Konami RLE always decodes to ${DEFAULT_PPU_ADDRESS:04X}, "
            f"cannot target ${ppu_address:04X}; use konami2"
        )
    return compress_konami_rle(data, ppu_address, address_header=False)


# Format key -> encoder(data, ppu_address)
ENCODERS = {
    "konami": _compress_konami_plain,
    "konami2": compress_konami_rle,
    "kemko": compress_kemko_rle,
}


def compress(key: str, data: bytes, ppu_address: int = DEFAULT_PPU_ADDRESS) -> bytes:
    """
    Compress data with the encoder paired with a format key.

    Args:
        key: Format key (case-insensitive)
        data: Uncompressed bytes
        ppu_address: Target PPU address

    Returns:
        Compressed stream

    Raises:
        UnknownFormatError: If no encoder exists for the key
    """
    encoder = ENCODERS.get(key.lower())
    if encoder is None:
        raise UnknownFormatError(
            f"No compressor for format {key!r}. Compression supports: "
            f"{', '.join(ENCODERS)}"
        )
    return encoder(data, ppu_address)
