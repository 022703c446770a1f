"""
NES Compress - PIL Renderer

PIL-based rendering of decoded nametables to PNG, for checking a decode
without loading the data into an emulator.
"""

from PIL import Image

from ..core.chr_tile import TILE_SIZE, PatternTable
from ..core.palettes import background_subpalettes
from ..core.ppu import (
    NAMETABLE_ADDRESSES,
    NAMETABLE_HEIGHT,
    NAMETABLE_WIDTH,
    get_attribute_table,
    get_background_palette,
    get_nametable,
    get_pattern_table,
)

# 2x2 nametable arrangement: 0 1 / 2 3
NAMETABLE_PIXEL_WIDTH = NAMETABLE_WIDTH * TILE_SIZE
NAMETABLE_PIXEL_HEIGHT = NAMETABLE_HEIGHT * TILE_SIZE


def attribute_palette(attributes: bytes, tile_row: int, tile_col: int) -> int:
    """
    Return the subpalette index (0-3) for a tile.

    Each attribute byte covers a 4x4 tile area, two bits per 2x2 quadrant:
    top-left in bits 0-1, top-right 2-3, bottom-left 4-5, bottom-right 6-7.

    Args:
        attributes: 64-byte attribute table
        tile_row: Tile row (0-29)
        tile_col: Tile column (0-31)
    """
    attr = attributes[(tile_row // 4) * 8 + (tile_col // 4)]
    shift = ((tile_row % 4) // 2) * 4 + ((tile_col % 4) // 2) * 2
    return (attr >> shift) & 0x03


def render_nametable(
    ppu: bytes, index: int, pattern_table: PatternTable, subpalettes
) -> Image.Image:
    """
    Render one nametable to a 256x240 PIL Image.

    Args:
        ppu: 16KB PPU image
        index: Nametable 0-3
        pattern_table: Tiles referenced by the nametable
        subpalettes: Four lists of four RGB colors

    Returns:
        PIL Image object
    """
    tiles = get_nametable(ppu, index)
    attributes = get_attribute_table(ppu, index)

    img = Image.new("RGB", (NAMETABLE_PIXEL_WIDTH, NAMETABLE_PIXEL_HEIGHT))
    pixels = img.load()
    assert pixels is not None

    for tile_row in range(NAMETABLE_HEIGHT):
        for tile_col in range(NAMETABLE_WIDTH):
            tile_idx = tiles[tile_row * NAMETABLE_WIDTH + tile_col]
            palette = subpalettes[attribute_palette(attributes, tile_row, tile_col)]
            tile_pixels = pattern_table.tile(tile_idx)

            base_x = tile_col * TILE_SIZE
            base_y = tile_row * TILE_SIZE
            for py in range(TILE_SIZE):
                for px in range(TILE_SIZE):
                    pixels[base_x + px, base_y + py] = palette[tile_pixels[py][px]]

    return img


def render_nametables(
    ppu: bytes, chr_data: bytes | None = None, pattern_table: int = 0
) -> Image.Image:
    """
    Render all four nametables in a 512x480 image.

    Args:
        ppu: 16KB PPU image
        chr_data: CHR data to use instead of the image's own pattern table.
            4KB or 8KB; with 8KB, pattern_table selects the half.
        pattern_table: Background pattern table (0 or 1)

    Returns:
        PIL Image object
    """
    if chr_data is not None:
        start = pattern_table * 0x1000 if len(chr_data) > 0x1000 else 0
        table = PatternTable(chr_data[start : start + 0x1000])
    else:
        table = PatternTable(get_pattern_table(ppu, pattern_table))

    subpalettes = background_subpalettes(get_background_palette(ppu))

    img = Image.new("RGB", (NAMETABLE_PIXEL_WIDTH * 2, NAMETABLE_PIXEL_HEIGHT * 2))
    for index in range(len(NAMETABLE_ADDRESSES)):
        x = (index % 2) * NAMETABLE_PIXEL_WIDTH
        y = (index // 2) * NAMETABLE_PIXEL_HEIGHT
        img.paste(render_nametable(ppu, index, table, subpalettes), (x, y))

    return img


def save_preview(
    path: str, ppu: bytes, chr_data: bytes | None = None, pattern_table: int = 0
):
    """Render all four nametables and save them as a PNG."""
    render_nametables(ppu, chr_data, pattern_table).save(path, "PNG")
