"""
NES Compress - Built-in Formats

Decode tables for the supported compression formats. Each table is tried
top to bottom and the first matching operation wins, so exact values must
come before the wider ranges that would also match them.

References:
    https://www.nesdev.org/wiki/Tile_compression
    https://datacrystal.romhacking.net/wiki/Blades_of_Steel:ROM_map
    https://en.wikipedia.org/wiki/PackBits
"""

from .operations import (
    ANY_BYTE,
    FormatCatalog,
    FormatDefinition,
    OpKind,
    byte_range,
    op,
)

# Konami RLE (Contra)
#
# 00-80 v   write v, n times
# 81-FE     copy n - 0x80 bytes
# FF        end of data
#
# 00 is not known to be used.
KONAMI_RLE = FormatDefinition(
    name="Konami RLE",
    key="konami",
    description="Konami RLE compression (as used in Contra)",
    operations=(
        op(
            OpKind.REPEAT,
            byte_range(0x00, 0x80),
            ANY_BYTE,
            operand="[1] [0]",
            size="2",
            note="repeat next byte n times",
        ),
        op(
            OpKind.COPY,
            byte_range(0x81, 0xFE),
            operand="[0]-128 1",
            size="[0]-127",
            note="copy n-0x80 bytes",
        ),
        op(OpKind.END, byte_range(0xFF), note="end of data"),
    ),
)

# Konami RLE 2 (Life Force, Blades of Steel)
#
# lo hi     starting PPU address (little endian)
# 00 v      write v, 256 times      (never seen, sometimes listed as copy 0)
# 01-7E v   write v, n times
# 7F lo hi  new PPU address
# 80 v      write v, 255 times      (inconsistent between games)
# 81-FE     copy n - 0x80 bytes
# FF        end of data
KONAMI_RLE_2 = FormatDefinition(
    name="Konami RLE 2",
    key="konami2",
    description="Konami RLE compression (as used in Life Force)",
    operations=(
        op(
            OpKind.ADDRESS,
            ANY_BYTE,
            ANY_BYTE,
            operand="[1]*256+[0]",
            size="2",
            requires_start=True,
            note="starting PPU address",
        ),
        op(
            OpKind.REPEAT,
            byte_range(0x00),
            ANY_BYTE,
            operand="[1] 256",
            size="2",
            discouraged=True,
            note="repeat next byte 256 times",
        ),
        op(
            OpKind.REPEAT,
            byte_range(0x01, 0x7E),
            ANY_BYTE,
            operand="[1] [0]",
            size="2",
            note="repeat next byte n times",
        ),
        op(
            OpKind.REPEAT,
            byte_range(0x80),
            ANY_BYTE,
            operand="[1] 255",
            size="2",
            discouraged=True,
            note="repeat next byte 255 times",
        ),
        op(
            OpKind.ADDRESS,
            byte_range(0x7F),
            ANY_BYTE,
            ANY_BYTE,
            operand="[2]*256+[1]",
            size="3",
            note="new PPU address",
        ),
        op(
            OpKind.COPY,
            byte_range(0x81, 0xFE),
            operand="[0]-128 1",
            size="[0]-127",
            note="copy n-0x80 bytes",
        ),
        op(OpKind.END, byte_range(0xFF), note="end of data"),
    ),
)

# Kemko RLE (Bugs Bunny Crazy Castle)
#
# FF xx 00  end of data (FF FF 00 in practice)
# FF xx yy  write xx, yy times
# 00-FE     literal byte
KEMKO_RLE = FormatDefinition(
    name="Kemko RLE",
    key="kemko",
    description="Kemko RLE compression (as used in Bugs Bunny Crazy Castle)",
    operations=(
        op(
            OpKind.ADDRESS,
            operand="0x2000",
            size="0",
            requires_start=True,
            note="data always starts at $2000",
        ),
        op(
            OpKind.END,
            byte_range(0xFF),
            ANY_BYTE,
            byte_range(0x00),
            size="3",
            note="end of data",
        ),
        op(
            OpKind.REPEAT,
            byte_range(0xFF),
            ANY_BYTE,
            ANY_BYTE,
            operand="[1] [2]",
            size="3",
            note="repeat xx yy times",
        ),
        op(
            OpKind.COPY,
            byte_range(0x00, 0xFE),
            operand="1 0",
            size="1",
            note="literal byte",
        ),
    ),
)

# NES Stripe Image RLE (Super Mario Bros.)
#
# Accepts both end markers seen in the wild.
#
# 00 / 80-FF    end of data (where an address is expected)
# hi lo         PPU address (big endian), then one run:
# 00-3F         copy n+1 bytes
# 40-7F v       write v, n-0x3F times
# 80-BF         copy n-0x7F bytes, down a column
# C0-FF v       write v, n-0xBF times, down a column
STRIPE_RLE = FormatDefinition(
    name="NES Stripe Image RLE",
    key="stripe",
    description="NES Stripe Image RLE (as used in Super Mario Bros.)",
    operations=(
        op(OpKind.END, byte_range(0x00), note="end of data"),
        op(OpKind.END, byte_range(0x80, 0xFF), note="end of data"),
        op(
            OpKind.ADDRESS,
            ANY_BYTE,
            ANY_BYTE,
            operand="[0]*256+[1]",
            size="2",
            no_break=True,
            note="PPU address",
        ),
        op(
            OpKind.COPY,
            byte_range(0x00, 0x3F),
            operand="[0]+1 1",
            size="[0]+2",
            note="copy n+1 bytes",
        ),
        op(
            OpKind.REPEAT,
            byte_range(0x40, 0x7F),
            ANY_BYTE,
            operand="[1] [0]-63",
            size="2",
            note="repeat next byte n-0x3F times",
        ),
        op(
            OpKind.COPY,
            byte_range(0x80, 0xBF),
            operand="[0]-127 1",
            size="[0]-126",
            address_step="32",
            note="copy n-0x7F bytes vertically",
        ),
        op(
            OpKind.REPEAT,
            byte_range(0xC0, 0xFF),
            ANY_BYTE,
            operand="[1] [0]-191",
            size="2",
            address_step="32",
            note="repeat next byte n-0xBF times vertically",
        ),
    ),
)

# Uncompressed dump of the whole PPU address space
PPU_DUMP = FormatDefinition(
    name="Full PPU Dump",
    key="ppudump",
    description="Uncompressed 16KB PPU memory dump",
    operations=(
        op(
            OpKind.ADDRESS,
            operand="0",
            size="0",
            requires_start=True,
            note="dump starts at $0000",
        ),
        op(
            OpKind.COPY,
            ANY_BYTE,
            operand="0x4000 0",
            size="0x4000",
            no_break=True,
            note="copy $4000 bytes",
        ),
        op(OpKind.END, note="end of data"),
    ),
)

# PackBits
#
# 00-7F     copy n+1 bytes
# 81-FF v   write v, 257-n times
#
# 80 is a no-op in the Apple definition; it is not accepted here.
PACKBITS = FormatDefinition(
    name="PackBits",
    key="packbits",
    description="Apple PackBits run-length encoding",
    operations=(
        op(
            OpKind.REPEAT,
            byte_range(0x81, 0xFF),
            ANY_BYTE,
            operand="[1] 257-[0]",
            size="2",
            note="repeat next byte 257-n times",
        ),
        op(
            OpKind.COPY,
            byte_range(0x00, 0x7F),
            operand="[0]+1 1",
            size="[0]+2",
            note="copy n+1 bytes",
        ),
    ),
)

ALL_FORMATS = (KONAMI_RLE, KONAMI_RLE_2, KEMKO_RLE, STRIPE_RLE, PPU_DUMP, PACKBITS)


def build_catalog() -> FormatCatalog:
    """Create a catalog holding every built-in format."""
    return FormatCatalog(ALL_FORMATS)


DEFAULT_CATALOG = build_catalog()
