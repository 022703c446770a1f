"""Unit tests for nescompress.core.ppu layout and region extraction."""

import pytest

from nescompress.core.ppu import (
    NAMETABLE_ADDRESSES,
    NAMETABLE_SIZE,
    NAMETABLE_TILES_SIZE,
    PPU_SIZE,
    REGION_NAMES,
    extract_regions,
    get_attribute_table,
    get_nametable,
    get_pattern_table,
    get_region,
    new_ppu_image,
    parse_ppu_address,
)


def _marked_image():
    """PPU image where every region starts with a distinct marker byte."""
    ppu = bytearray(PPU_SIZE)
    for i, base in enumerate(NAMETABLE_ADDRESSES):
        ppu[base] = 0x10 + i
        ppu[base + NAMETABLE_TILES_SIZE] = 0x20 + i
    ppu[0x0000] = 0x30
    ppu[0x1000] = 0x31
    ppu[0x3F00] = 0x0F
    ppu[0x3F10] = 0x16
    return ppu


class TestConstants:
    """Test PPU layout constants have expected values."""

    def test_ppu_size(self):
        assert PPU_SIZE == 0x4000  # 16KB

    def test_nametable_addresses(self):
        assert NAMETABLE_ADDRESSES == [0x2000, 0x2400, 0x2800, 0x2C00]

    def test_nametable_layout(self):
        assert NAMETABLE_SIZE == 1024
        assert NAMETABLE_TILES_SIZE == 960


class TestNewPpuImage:
    """Tests for new_ppu_image()."""

    def test_zeroed(self):
        ppu = new_ppu_image()
        assert len(ppu) == PPU_SIZE
        assert not any(ppu)

    def test_fill_covers_tiles_only(self):
        ppu = new_ppu_image(0x24)
        for base in NAMETABLE_ADDRESSES:
            assert ppu[base : base + NAMETABLE_TILES_SIZE] == bytes([0x24]) * 960
            # Attribute tables stay zero
            assert not any(ppu[base + NAMETABLE_TILES_SIZE : base + NAMETABLE_SIZE])
        assert not any(ppu[0x0000:0x2000])
        assert not any(ppu[0x3000:])

    def test_fill_out_of_range(self):
        with pytest.raises(ValueError, match="does not fit in a byte"):
            new_ppu_image(0x100)


class TestParsePpuAddress:
    """Tests for parse_ppu_address()."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("nt0", 0x2000),
            ("NT1", 0x2400),
            ("nt3", 0x2C00),
            ("att0", 0x23C0),
            ("att2", 0x2BC0),
            ("chr1", 0x1000),
            ("bgpal", 0x3F00),
            ("spritepal", 0x3F10),
        ],
    )
    def test_section_names(self, text, expected):
        assert parse_ppu_address(text) == expected

    def test_numbers(self):
        assert parse_ppu_address("0x2400") == 0x2400
        assert parse_ppu_address("$2800") == 0x2800
        assert parse_ppu_address("8192") == 0x2000

    def test_out_of_range(self):
        with pytest.raises(ValueError, match="out of range"):
            parse_ppu_address("0x4000")

    def test_garbage(self):
        with pytest.raises(ValueError, match="Invalid number"):
            parse_ppu_address("nt9")


class TestRegions:
    """Tests for region getters and extract_regions()."""

    def test_nametable_includes_attributes(self):
        ppu = _marked_image()
        nt = get_nametable(ppu, 2)
        assert len(nt) == 1024
        assert nt[0] == 0x12
        assert nt[NAMETABLE_TILES_SIZE] == 0x22

    def test_attribute_table(self):
        ppu = _marked_image()
        att = get_attribute_table(ppu, 3)
        assert len(att) == 64
        assert att[0] == 0x23

    def test_pattern_table(self):
        ppu = _marked_image()
        assert get_pattern_table(ppu, 1)[0] == 0x31
        assert len(get_pattern_table(ppu, 0)) == 0x1000

    def test_palettes(self):
        ppu = _marked_image()
        assert get_region(ppu, "bkpal")[0] == 0x0F
        assert get_region(ppu, "bgpal") == get_region(ppu, "bkpal")
        assert get_region(ppu, "spritepal")[0] == 0x16
        assert len(get_region(ppu, "spritepal")) == 16

    def test_whole_image(self):
        ppu = _marked_image()
        assert get_region(ppu, "ppu") == bytes(ppu)

    def test_unknown_region(self):
        with pytest.raises(ValueError, match="Unknown PPU region"):
            get_region(bytes(PPU_SIZE), "oam")

    def test_bad_index(self):
        with pytest.raises(ValueError, match="Nametable index must be 0-3"):
            get_nametable(bytes(PPU_SIZE), 4)

    def test_wrong_image_size(self):
        with pytest.raises(ValueError, match="PPU image must be"):
            get_nametable(bytes(100), 0)

    def test_extract_regions(self):
        regions = extract_regions(_marked_image())
        assert list(regions) == REGION_NAMES
        assert [len(regions[n]) for n in REGION_NAMES] == [1024] * 4 + [16, 16]
        assert regions["nt1"][0] == 0x11
