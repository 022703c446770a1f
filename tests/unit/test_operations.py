"""Unit tests for nescompress.core.operations and the built-in catalog."""

import pytest

from nescompress.core.errors import UnknownFormatError
from nescompress.core.formats import ALL_FORMATS, DEFAULT_CATALOG
from nescompress.core.operations import (
    ANY_BYTE,
    ByteRange,
    FormatCatalog,
    FormatDefinition,
    OpKind,
    byte_range,
    op,
)


class TestByteRange:
    """Tests for ByteRange predicates."""

    def test_contains_bounds(self):
        r = ByteRange(0x81, 0xFE)
        assert r.contains(0x81)
        assert r.contains(0xFE)
        assert not r.contains(0x80)
        assert not r.contains(0xFF)

    def test_past_end_never_matches(self):
        """None (past the end of input) only matches wildcards."""
        assert not ANY_BYTE.contains(None)

    def test_single_value_shorthand(self):
        assert byte_range(0x7F) == ByteRange(0x7F, 0x7F)

    @pytest.mark.parametrize("low, high", [(0x10, 0x0F), (-1, 0x10), (0x00, 0x100)])
    def test_invalid_range(self, low, high):
        with pytest.raises(ValueError, match="Invalid byte range"):
            ByteRange(low, high)

    def test_str(self):
        assert str(ByteRange(0x81, 0xFE)) == "81-FE"
        assert str(byte_range(0xFF)) == "FF"


class TestOperation:
    """Tests for Operation construction and matching."""

    def test_placeholder_on_wildcard_rejected(self):
        with pytest.raises(ValueError, match="wildcard"):
            op(OpKind.REPEAT, byte_range(0x01, 0x7E), operand="[1] [0]", size="2")

    def test_operand_count_checked(self):
        with pytest.raises(ValueError, match="needs 2 operand"):
            op(OpKind.REPEAT, ANY_BYTE, operand="[0]", size="1")

    def test_end_takes_no_operand(self):
        end = op(OpKind.END, byte_range(0xFF))
        assert len(end.operand) == 0

    def test_matches_all_predicates(self):
        rule = op(OpKind.END, byte_range(0xFF), ANY_BYTE, byte_range(0x00), size="3")
        assert rule.matches((0xFF, 0x12, 0x00), at_start=False)
        assert not rule.matches((0xFF, 0x12, 0x01), at_start=False)
        assert not rule.matches((0xFF, 0x12, None), at_start=False)

    def test_wildcards_match_past_end(self):
        rule = op(OpKind.END)
        assert rule.matches((None, None, None), at_start=False)

    def test_requires_start(self):
        rule = op(OpKind.ADDRESS, operand="0x2000", size="0", requires_start=True)
        assert rule.matches((0x01, 0x02, 0x03), at_start=True)
        assert not rule.matches((0x01, 0x02, 0x03), at_start=False)

    def test_pattern_text(self):
        rule = op(
            OpKind.ADDRESS, byte_range(0x7F), ANY_BYTE, ANY_BYTE, operand="[2]*256+[1]", size="3"
        )
        assert rule.pattern() == "7F 00-FF 00-FF"
        assert op(OpKind.END).pattern() == "*"

    def test_describe_lists_flags(self):
        rule = op(OpKind.REPEAT, byte_range(0x00), ANY_BYTE, operand="[1] 256", size="2",
                  discouraged=True, note="repeat 256")
        assert "discouraged" in rule.describe()
        assert "repeat 256" in rule.describe()


class TestFormatCatalog:
    """Tests for FormatCatalog lookup."""

    def test_keys_in_registration_order(self):
        assert DEFAULT_CATALOG.keys() == [
            "konami",
            "konami2",
            "kemko",
            "stripe",
            "ppudump",
            "packbits",
        ]

    def test_case_insensitive_lookup(self, catalog):
        assert catalog.get("KONAMI2").name == "Konami RLE 2"
        assert "Kemko" in catalog

    def test_unknown_key(self, catalog):
        with pytest.raises(UnknownFormatError, match="Unknown format 'lz77'"):
            catalog.get("lz77")

    def test_duplicate_keys_rejected(self):
        with pytest.raises(ValueError, match="Duplicate format key"):
            FormatCatalog([ALL_FORMATS[0], ALL_FORMATS[0]])

    def test_len_and_iteration(self, catalog):
        assert len(catalog) == 6
        assert [d.key for d in catalog] == catalog.keys()

    def test_empty_format_rejected(self):
        with pytest.raises(ValueError, match="has no operations"):
            FormatDefinition(name="Empty", key="empty", operations=())


class TestBuiltinTables:
    """Spot checks on the built-in decode tables."""

    def test_konami2_discouraged_rules(self, konami2):
        discouraged = [o for o in konami2.operations if o.discouraged]
        assert [o.byte0 for o in discouraged] == [byte_range(0x00), byte_range(0x80)]

    def test_konami2_starts_with_address(self, konami2):
        first = konami2.operations[0]
        assert first.kind == OpKind.ADDRESS
        assert first.requires_start

    def test_stripe_address_is_no_break(self, stripe):
        address_ops = [o for o in stripe.operations if o.kind == OpKind.ADDRESS]
        assert len(address_ops) == 1
        assert address_ops[0].no_break

    def test_kemko_end_before_repeat(self, kemko):
        """FF xx 00 must be tried before FF xx yy."""
        kinds = [o.kind for o in kemko.operations]
        assert kinds.index(OpKind.END) < kinds.index(OpKind.REPEAT)
