"""
NES Compress - Format Definitions

Declarative model of a compression format: an ordered list of operations,
each matched against up to three lookahead bytes. The decoder walks this
list; nothing in here knows how a particular game packs its data.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional

from .errors import UnknownFormatError
from .expression import Template


class OpKind(Enum):
    """The effect an operation has on the output image."""

    ADDRESS = "address"
    REPEAT = "repeat"
    COPY = "copy"
    END = "end"


# Number of operands each kind reads from its operand template
OPERAND_COUNTS = {
    OpKind.ADDRESS: 1,
    OpKind.REPEAT: 2,
    OpKind.COPY: 2,
}


@dataclass(frozen=True)
class ByteRange:
    """Closed range of byte values matched by one lookahead slot."""

    low: int
    high: int

    def __post_init__(self):
        if not 0 <= self.low <= self.high <= 0xFF:
            raise ValueError(f"Invalid byte range {self.low:#04x}..{self.high:#04x}")

    def contains(self, value: Optional[int]) -> bool:
        # None marks a byte past the end of input; only wildcards accept it
        return value is not None and self.low <= value <= self.high

    def __str__(self) -> str:
        if self.low == self.high:
            return f"{self.low:02X}"
        return f"{self.low:02X}-{self.high:02X}"


def byte_range(low: int, high: Optional[int] = None) -> ByteRange:
    """Shorthand for ByteRange; a single argument matches one exact value."""
    return ByteRange(low, low if high is None else high)


ANY_BYTE = ByteRange(0x00, 0xFF)


@dataclass(frozen=True)
class Operation:
    """
    One rule of a format's decode table.

    Attributes:
        kind: Effect of the operation
        byte0, byte1, byte2: Predicates on the lookahead bytes (None = wildcard)
        operand: Template for the kind's operands
            ADDRESS: "address"
            REPEAT: "value count"
            COPY: "count relative_offset"
        size: Template for the number of input bytes consumed
        address_step: Template for the output address increment per write
        requires_start: Only matches at the first cursor position of a decode
        no_break: After firing, keep scanning the following operations at the
            new cursor position instead of starting a new pass
        discouraged: Decodable but unreliable in real data (informational)
        note: Human-readable description
    """

    kind: OpKind
    byte0: Optional[ByteRange] = None
    byte1: Optional[ByteRange] = None
    byte2: Optional[ByteRange] = None
    operand: Template = field(default_factory=lambda: Template(""))
    size: Template = field(default_factory=lambda: Template("1"))
    address_step: Template = field(default_factory=lambda: Template("1"))
    requires_start: bool = False
    no_break: bool = False
    discouraged: bool = False
    note: str = ""

    def __post_init__(self):
        expected = OPERAND_COUNTS.get(self.kind)
        if expected is not None and len(self.operand) != expected:
            raise ValueError(
                f"{self.kind.value} operation needs {expected} operand(s), "
                f"got {self.operand.text!r}"
            )
        for template in (self.operand, self.size, self.address_step):
            for index in template.placeholders():
                if self.predicates[index] is None:
                    raise ValueError(
                        f"Template {template.text!r} uses [{index}] but byte{index} "
                        "is a wildcard"
                    )

    @property
    def predicates(self) -> tuple:
        return (self.byte0, self.byte1, self.byte2)

    def matches(self, lookahead: tuple, at_start: bool) -> bool:
        """
        Check whether this operation applies at the cursor.

        Args:
            lookahead: Three byte values, None past the end of input
            at_start: True if no operation has fired yet in this decode

        Returns:
            True if every non-wildcard predicate holds and the start rule is met
        """
        if self.requires_start and not at_start:
            return False
        for predicate, value in zip(self.predicates, lookahead):
            if predicate is not None and not predicate.contains(value):
                return False
        return True

    def pattern(self) -> str:
        """Byte pattern as text, e.g. "7F xx xx" or "81-FE"."""
        parts = []
        for predicate in self.predicates:
            parts.append("xx" if predicate is None else str(predicate))
        while parts and parts[-1] == "xx":
            parts.pop()
        return " ".join(parts) or "*"

    def describe(self) -> str:
        label = self.note or self.kind.value
        flags = []
        if self.requires_start:
            flags.append("start")
        if self.no_break:
            flags.append("no-break")
        if self.discouraged:
            flags.append("discouraged")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        return f"{self.pattern():<12} {label}{suffix}"


def op(
    kind: OpKind,
    byte0: Optional[ByteRange] = None,
    byte1: Optional[ByteRange] = None,
    byte2: Optional[ByteRange] = None,
    operand: str = "",
    size: str = "1",
    address_step: str = "1",
    **flags,
) -> Operation:
    """Build an Operation, compiling its templates."""
    return Operation(
        kind=kind,
        byte0=byte0,
        byte1=byte1,
        byte2=byte2,
        operand=Template(operand),
        size=Template(size),
        address_step=Template(address_step),
        **flags,
    )


@dataclass(frozen=True)
class FormatDefinition:
    """A named compression format and its ordered decode table."""

    name: str
    key: str
    operations: tuple[Operation, ...]
    description: str = ""

    def __post_init__(self):
        if not self.operations:
            raise ValueError(f"Format {self.key!r} has no operations")


class FormatCatalog:
    """
    Immutable registry of format definitions, looked up by short key.

    Keys are matched case-insensitively. Iteration follows registration order.
    """

    def __init__(self, definitions):
        self._formats: dict[str, FormatDefinition] = {}
        for definition in definitions:
            key = definition.key.lower()
            if key in self._formats:
                raise ValueError(f"Duplicate format key: {definition.key!r}")
            self._formats[key] = definition

    def get(self, key: str) -> FormatDefinition:
        """
        Look up a format by key.

        Raises:
            UnknownFormatError: If no format has this key
        """
        try:
            return self._formats[key.lower()]
        except KeyError:
            raise UnknownFormatError(
                f"Unknown format {key!r}. Valid formats are: {', '.join(self.keys())}"
            ) from None

    def keys(self) -> list[str]:
        return [definition.key for definition in self._formats.values()]

    def __contains__(self, key: str) -> bool:
        return key.lower() in self._formats

    def __iter__(self) -> Iterator[FormatDefinition]:
        return iter(self._formats.values())

    def __len__(self) -> int:
        return len(self._formats)
