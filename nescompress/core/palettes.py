"""
NES Compress - Color Palettes

The NES master palette and helpers for turning PPU palette RAM into RGB
colors for previews.
"""

from typing import List, Tuple

# Type alias for RGB color
RGBColor = Tuple[int, int, int]

# 2C02 master palette, indexed by the 6-bit color values stored in palette RAM
NES_MASTER_PALETTE: List[RGBColor] = [
    (84, 84, 84), (0, 30, 116), (8, 16, 144), (48, 0, 136),
    (68, 0, 100), (92, 0, 48), (84, 4, 0), (60, 24, 0),
    (32, 42, 0), (8, 58, 0), (0, 64, 0), (0, 60, 0),
    (0, 50, 60), (0, 0, 0), (0, 0, 0), (0, 0, 0),
    (152, 150, 152), (8, 76, 196), (48, 50, 236), (92, 30, 228),
    (136, 20, 176), (160, 20, 100), (152, 34, 32), (120, 60, 0),
    (84, 90, 0), (40, 114, 0), (8, 124, 0), (0, 118, 40),
    (0, 102, 120), (0, 0, 0), (0, 0, 0), (0, 0, 0),
    (236, 238, 236), (76, 154, 236), (120, 124, 236), (176, 98, 236),
    (228, 84, 236), (236, 88, 180), (236, 106, 100), (212, 136, 32),
    (160, 170, 0), (116, 196, 0), (76, 208, 32), (56, 204, 108),
    (56, 180, 204), (60, 60, 60), (0, 0, 0), (0, 0, 0),
    (236, 238, 236), (168, 204, 236), (188, 188, 236), (212, 178, 236),
    (236, 174, 236), (236, 174, 212), (236, 180, 176), (228, 196, 144),
    (204, 210, 120), (180, 222, 120), (168, 226, 144), (152, 226, 180),
    (160, 214, 228), (160, 162, 160), (0, 0, 0), (0, 0, 0),
]

# Used when the image holds no palette (all zeros): black plus three grays
GRAYSCALE_PALETTE: List[int] = [0x0F, 0x00, 0x10, 0x30]


def nes_color(value: int) -> RGBColor:
    """Look up a palette RAM value; the top two bits are ignored."""
    return NES_MASTER_PALETTE[value & 0x3F]


def background_subpalettes(palette_ram: bytes) -> List[List[RGBColor]]:
    """
    Split the 16-byte background palette into four RGB subpalettes.

    Color 0 of every subpalette is the shared backdrop ($3F00). An all-zero
    palette is replaced by a grayscale ramp so previews stay readable.

    Args:
        palette_ram: 16 bytes from $3F00

    Returns:
        Four lists of four RGB colors
    """
    if not any(palette_ram):
        ramp = [nes_color(v) for v in GRAYSCALE_PALETTE]
        return [list(ramp) for _ in range(4)]

    backdrop = nes_color(palette_ram[0])
    subpalettes = []
    for i in range(4):
        base = i * 4
        colors = [backdrop] + [nes_color(palette_ram[base + j]) for j in range(1, 4)]
        subpalettes.append(colors)
    return subpalettes
