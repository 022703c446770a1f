"""Shared pytest fixtures for compression tests."""

import random

import pytest

from nescompress.core.decompressor import DecodeStats
from nescompress.core.formats import build_catalog
from nescompress.core.ppu import NAMETABLE_SIZE, NAMETABLE_TILES_SIZE


@pytest.fixture
def catalog():
    """A freshly built catalog of the built-in formats."""
    return build_catalog()


@pytest.fixture
def konami(catalog):
    return catalog.get("konami")


@pytest.fixture
def konami2(catalog):
    return catalog.get("konami2")


@pytest.fixture
def kemko(catalog):
    return catalog.get("kemko")


@pytest.fixture
def stripe(catalog):
    return catalog.get("stripe")


@pytest.fixture
def ppudump(catalog):
    return catalog.get("ppudump")


@pytest.fixture
def packbits(catalog):
    return catalog.get("packbits")


@pytest.fixture
def stats():
    return DecodeStats()


@pytest.fixture
def title_screen_nametable():
    """
    Build a 1024-byte nametable that looks like a title screen.

    Mostly blank tile $24 with rows of text, a border of $FF tiles and a
    varied attribute table, so both long runs and literal stretches occur.
    """
    rng = random.Random(1987)
    tiles = bytearray([0x24]) * NAMETABLE_TILES_SIZE

    # Border rows made of tile $FF
    tiles[0:32] = bytes([0xFF]) * 32
    tiles[29 * 32 : 30 * 32] = bytes([0xFF]) * 32

    # Text rows with random letters and occasional repeated pairs
    for row in (8, 10, 12, 20):
        for col in range(4, 28):
            tiles[row * 32 + col] = rng.choice([0x0A, 0x0B, 0x0C, 0x0D, 0x0E, 0xFF, 0x24])

    attributes = bytes(rng.choice([0x00, 0x55, 0xAA, 0xFF, 0x50]) for _ in range(64))
    data = bytes(tiles) + attributes
    assert len(data) == NAMETABLE_SIZE
    return data


@pytest.fixture
def noisy_data():
    """Random bytes with random-length runs mixed in."""
    rng = random.Random(42)
    data = bytearray()
    while len(data) < NAMETABLE_SIZE:
        if rng.random() < 0.3:
            data.extend(bytes([rng.randrange(256)]) * rng.randrange(1, 300))
        else:
            data.append(rng.randrange(256))
    return bytes(data[:NAMETABLE_SIZE])
