"""Unit tests for the PIL nametable preview renderer."""

from PIL import Image

from nescompress.core.palettes import nes_color
from nescompress.core.ppu import PPU_SIZE
from nescompress.rendering.pil_renderer import (
    attribute_palette,
    render_nametables,
    save_preview,
)


def _ppu_with_solid_tile():
    """Image whose tile 1 is solid color 1, used at the top-left of nametable 0."""
    ppu = bytearray(PPU_SIZE)
    ppu[0x0010:0x0018] = bytes([0xFF]) * 8  # tile 1, plane 0
    ppu[0x2000] = 1
    ppu[0x3F00:0x3F04] = bytes([0x0F, 0x16, 0x27, 0x30])
    return ppu


class TestAttributePalette:
    """Tests for attribute_palette() quadrant selection."""

    def test_quadrants(self):
        attributes = bytearray(64)
        attributes[0] = 0b11_10_01_00
        assert attribute_palette(bytes(attributes), 0, 0) == 0
        assert attribute_palette(bytes(attributes), 0, 2) == 1
        assert attribute_palette(bytes(attributes), 2, 0) == 2
        assert attribute_palette(bytes(attributes), 3, 3) == 3

    def test_second_attribute_byte(self):
        attributes = bytearray(64)
        attributes[9] = 0x02  # rows 4-7, cols 4-7
        assert attribute_palette(bytes(attributes), 4, 5) == 2


class TestRenderNametables:
    """Tests for render_nametables() and save_preview()."""

    def test_size(self):
        img = render_nametables(bytes(PPU_SIZE))
        assert img.size == (512, 480)

    def test_tile_colors(self):
        img = render_nametables(_ppu_with_solid_tile())
        assert img.getpixel((0, 0)) == nes_color(0x16)
        assert img.getpixel((8, 0)) == nes_color(0x0F)

    def test_external_chr(self):
        chr_data = bytearray(0x2000)
        # Tile 0 of the second pattern table is solid color 3
        chr_data[0x1000:0x1010] = bytes([0xFF]) * 16
        ppu = bytearray(PPU_SIZE)
        ppu[0x3F00:0x3F04] = bytes([0x0F, 0x16, 0x27, 0x30])

        img = render_nametables(ppu, bytes(chr_data), pattern_table=1)
        assert img.getpixel((300, 300)) == nes_color(0x30)

    def test_save_preview(self, tmp_path):
        path = tmp_path / "preview.png"
        save_preview(str(path), _ppu_with_solid_tile())
        with Image.open(path) as img:
            assert img.format == "PNG"
            assert img.size == (512, 480)
