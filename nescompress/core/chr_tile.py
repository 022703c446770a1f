"""
NES Compress - CHR Tile Decoding

NES CHR format tile decoding used to preview decoded nametables.
"""

from typing import List

# CHR format constants
TILE_SIZE = 8  # 8x8 pixels per tile
BYTES_PER_TILE = 16  # 16 bytes per tile (8 bytes per bitplane)


def decode_tile(tile_data: bytes, tile_idx: int = 0) -> List[List[int]]:
    """
    Decode a single 8x8 NES CHR tile into 2-bit pixel values.

    NES tiles use two bitplanes to encode 4-color (2-bit) pixel data.
    Each tile is 16 bytes: 8 bytes for plane 0 (low bit), 8 bytes for plane 1 (high bit).

    Args:
        tile_data: Either a full pattern table or a single 16-byte tile
        tile_idx: Tile index if tile_data is a full pattern table (default: 0)

    Returns:
        8x8 array of pixel values (0-3), where each value is a palette index
    """
    offset = tile_idx * BYTES_PER_TILE

    # Handle out-of-range indices
    if offset + BYTES_PER_TILE > len(tile_data):
        return [[0] * TILE_SIZE for _ in range(TILE_SIZE)]

    plane0 = tile_data[offset : offset + 8]  # Low bit plane
    plane1 = tile_data[offset + 8 : offset + 16]  # High bit plane

    pixels = []
    for row in range(TILE_SIZE):
        row_pixels = []
        for col in range(TILE_SIZE):
            # MSB is the leftmost pixel
            bit_mask = 0x80 >> col
            low_bit = 1 if (plane0[row] & bit_mask) else 0
            high_bit = 1 if (plane1[row] & bit_mask) else 0
            row_pixels.append(low_bit | (high_bit << 1))
        pixels.append(row_pixels)

    return pixels


class PatternTable:
    """
    256 decoded tiles from one 4KB pattern table.

    Tiles are decoded on first use; a nametable usually references far fewer
    than 256 distinct tiles.
    """

    def __init__(self, data: bytes):
        self.data = bytes(data)
        self._cache: dict[int, List[List[int]]] = {}

    def tile(self, tile_idx: int) -> List[List[int]]:
        if tile_idx not in self._cache:
            self._cache[tile_idx] = decode_tile(self.data, tile_idx)
        return self._cache[tile_idx]
