"""
NES Compress - PPU Memory Layout

Constants for the 16KB PPU address space the decoder writes into, the named
sections encoders can target, and extraction of the fixed-offset regions
(nametables, attribute tables, pattern tables, palettes) from a decoded image.
"""

from ..formats.hex_utils import parse_int

# PPU address space
PPU_SIZE = 0x4000

# Pattern tables ($0000-$1FFF)
PATTERN_TABLE_ADDRESSES = [0x0000, 0x1000]
PATTERN_TABLE_SIZE = 0x1000

# Nametables ($2000-$2FFF), each 960 tile bytes followed by 64 attribute bytes
NAMETABLE_ADDRESSES = [0x2000, 0x2400, 0x2800, 0x2C00]
NAMETABLE_SIZE = 0x400
NAMETABLE_TILES_SIZE = 0x3C0
ATTRIBUTE_TABLE_SIZE = 0x40
NAMETABLE_WIDTH = 32  # Tiles per row
NAMETABLE_HEIGHT = 30  # Tile rows

# Palettes ($3F00-$3F1F)
BACKGROUND_PALETTE_ADDRESS = 0x3F00
SPRITE_PALETTE_ADDRESS = 0x3F10
PALETTE_SIZE = 0x10

# Decoding always starts writing here unless the format sets an address
DEFAULT_PPU_ADDRESS = 0x2000

# Named targets accepted wherever a PPU address is expected
PPU_SECTIONS = {
    "nt0": 0x2000,
    "nt1": 0x2400,
    "nt2": 0x2800,
    "nt3": 0x2C00,
    "att0": 0x23C0,
    "att1": 0x27C0,
    "att2": 0x2BC0,
    "att3": 0x2FC0,
    "chr0": 0x0000,
    "chr1": 0x1000,
    "bgpal": 0x3F00,
    "spritepal": 0x3F10,
}

# Regions written by extract_regions(), in output order
REGION_NAMES = ["nt0", "nt1", "nt2", "nt3", "bkpal", "spritepal"]


def new_ppu_image(fill: int = 0) -> bytearray:
    """
    Allocate a PPU image with the nametable tile areas set to fill.

    Attribute tables are left at zero.

    Args:
        fill: Byte value written to the 960 tile bytes of every nametable

    Returns:
        Zeroed 16KB bytearray with nametable tiles prefilled
    """
    if not 0 <= fill <= 0xFF:
        raise ValueError(f"Fill value {fill} does not fit in a byte")
    ppu = bytearray(PPU_SIZE)
    if fill:
        for base in NAMETABLE_ADDRESSES:
            ppu[base : base + NAMETABLE_TILES_SIZE] = bytes([fill]) * NAMETABLE_TILES_SIZE
    return ppu


def parse_ppu_address(text: str) -> int:
    """
    Parse a PPU address given as a number or a section name.

    Args:
        text: "nt0".."nt3", "att0".."att3", "chr0", "chr1", "bgpal",
            "spritepal", or a number ("0x2400", "$2400", "9216")

    Returns:
        PPU address

    Raises:
        ValueError: If text is neither a section name nor a valid address
    """
    section = PPU_SECTIONS.get(text.strip().lower())
    if section is not None:
        return section
    address = parse_int(text)
    if address >= PPU_SIZE:
        raise ValueError(f"PPU address ${address:04X} out of range")
    return address


def _check_image(ppu: bytes):
    if len(ppu) != PPU_SIZE:
        raise ValueError(f"PPU image must be {PPU_SIZE:#x} bytes, got {len(ppu):#x}")


def _check_index(index: int, count: int, what: str):
    if not 0 <= index < count:
        raise ValueError(f"{what} index must be 0-{count - 1}, got {index}")


def get_nametable(ppu: bytes, index: int) -> bytes:
    """Return nametable 0-3 including its attribute table (1024 bytes)."""
    _check_image(ppu)
    _check_index(index, len(NAMETABLE_ADDRESSES), "Nametable")
    base = NAMETABLE_ADDRESSES[index]
    return bytes(ppu[base : base + NAMETABLE_SIZE])


def get_attribute_table(ppu: bytes, index: int) -> bytes:
    """Return the 64 attribute bytes of nametable 0-3."""
    _check_image(ppu)
    _check_index(index, len(NAMETABLE_ADDRESSES), "Attribute table")
    base = NAMETABLE_ADDRESSES[index] + NAMETABLE_TILES_SIZE
    return bytes(ppu[base : base + ATTRIBUTE_TABLE_SIZE])


def get_pattern_table(ppu: bytes, index: int) -> bytes:
    """Return pattern table 0 or 1 (4096 bytes of CHR data)."""
    _check_image(ppu)
    _check_index(index, len(PATTERN_TABLE_ADDRESSES), "Pattern table")
    base = PATTERN_TABLE_ADDRESSES[index]
    return bytes(ppu[base : base + PATTERN_TABLE_SIZE])


def get_background_palette(ppu: bytes) -> bytes:
    _check_image(ppu)
    return bytes(ppu[BACKGROUND_PALETTE_ADDRESS : BACKGROUND_PALETTE_ADDRESS + PALETTE_SIZE])


def get_sprite_palette(ppu: bytes) -> bytes:
    _check_image(ppu)
    return bytes(ppu[SPRITE_PALETTE_ADDRESS : SPRITE_PALETTE_ADDRESS + PALETTE_SIZE])


def get_region(ppu: bytes, name: str) -> bytes:
    """
    Return a region by name.

    Args:
        ppu: 16KB PPU image
        name: "nt0".."nt3", "att0".."att3", "chr0", "chr1", "bkpal",
            "spritepal" or "ppu" for the whole image

    Raises:
        ValueError: If the name is unknown or the image has the wrong size
    """
    key = name.lower()
    if key.startswith("nt") and key[2:].isdigit():
        return get_nametable(ppu, int(key[2:]))
    if key.startswith("att") and key[3:].isdigit():
        return get_attribute_table(ppu, int(key[3:]))
    if key.startswith("chr") and key[3:].isdigit():
        return get_pattern_table(ppu, int(key[3:]))
    if key in ("bkpal", "bgpal"):
        return get_background_palette(ppu)
    if key == "spritepal":
        return get_sprite_palette(ppu)
    if key == "ppu":
        _check_image(ppu)
        return bytes(ppu)
    raise ValueError(f"Unknown PPU region: {name!r}")


def extract_regions(ppu: bytes) -> dict[str, bytes]:
    """
    Slice the four nametables and both palettes out of a decoded image.

    Returns:
        Dict keyed by REGION_NAMES
    """
    return {name: get_region(ppu, name) for name in REGION_NAMES}
