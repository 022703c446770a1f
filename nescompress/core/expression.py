"""
NES Compress - Template Expressions

Small arithmetic language used by the format tables to compute operands,
operation sizes and address steps from the lookahead bytes.

Evaluation order is fixed and intentionally simple:

    1. split on the first '+', evaluate both halves, add
    2. otherwise split on the first '-', evaluate both halves, subtract
    3. otherwise split on the first '*', then the first '/', in a second tier
    4. otherwise parse a literal (decimal, 0x-hex or $-hex)

Splitting at the first operator makes '-' and '/' right-associative:
"10-3-2" is 10-(3-2) = 9. Format tables are written against this order.
"""

import re

from ..formats.hex_utils import parse_int
from .errors import MalformedExpressionError

# Placeholders refer to lookahead bytes [0], [1] and [2]
_PLACEHOLDER = re.compile(r"\[([0-2])\]")


class Node:
    """Base class for compiled expression nodes."""

    def eval(self, values: tuple) -> int:
        raise NotImplementedError

    def placeholders(self) -> set[int]:
        return set()


class Literal(Node):
    def __init__(self, value: int):
        self.value = value

    def eval(self, values: tuple) -> int:
        return self.value

    def __repr__(self) -> str:
        return f"Literal({self.value})"


class Placeholder(Node):
    def __init__(self, index: int):
        self.index = index

    def eval(self, values: tuple) -> int:
        value = values[self.index] if self.index < len(values) else None
        if value is None:
            raise MalformedExpressionError(
                f"Placeholder [{self.index}] has no lookahead byte to substitute"
            )
        return value

    def placeholders(self) -> set[int]:
        return {self.index}

    def __repr__(self) -> str:
        return f"Placeholder({self.index})"


class BinaryOp(Node):
    def __init__(self, op: str, left: Node, right: Node):
        self.op = op
        self.left = left
        self.right = right

    def eval(self, values: tuple) -> int:
        a = self.left.eval(values)
        b = self.right.eval(values)
        if self.op == "+":
            return a + b
        if self.op == "-":
            return a - b
        if self.op == "*":
            return a * b
        if b == 0:
            raise MalformedExpressionError("Division by zero")
        # Truncate toward zero
        quotient = abs(a) // abs(b)
        return -quotient if (a < 0) != (b < 0) else quotient

    def placeholders(self) -> set[int]:
        return self.left.placeholders() | self.right.placeholders()

    def __repr__(self) -> str:
        return f"BinaryOp({self.op!r}, {self.left!r}, {self.right!r})"


def _split_first(text: str, op: str) -> tuple[str, str] | None:
    idx = text.find(op)
    if idx < 0:
        return None
    return text[:idx], text[idx + 1 :]


def _parse_sum(text: str) -> Node:
    for op in ("+", "-"):
        parts = _split_first(text, op)
        if parts is not None:
            return BinaryOp(op, _parse_sum(parts[0]), _parse_sum(parts[1]))
    return _parse_product(text)


def _parse_product(text: str) -> Node:
    for op in ("*", "/"):
        parts = _split_first(text, op)
        if parts is not None:
            return BinaryOp(op, _parse_product(parts[0]), _parse_product(parts[1]))
    return _parse_atom(text)


def _parse_atom(text: str) -> Node:
    s = text.strip()
    match = _PLACEHOLDER.fullmatch(s)
    if match:
        return Placeholder(int(match.group(1)))
    try:
        return Literal(parse_int(s))
    except ValueError:
        raise MalformedExpressionError(f"Invalid token {s!r} in expression") from None


def parse(text: str) -> Node:
    """
    Compile a single expression into a node tree.

    Args:
        text: Expression text, optionally containing [0]..[2] placeholders

    Returns:
        Root node of the compiled expression

    Raises:
        MalformedExpressionError: If any token is not a number or placeholder
    """
    return _parse_sum(text)


def evaluate(text: str) -> int:
    """
    Evaluate an expression that contains no placeholders.

    Example:
        >>> evaluate("0x10+2*3")
        22
        >>> evaluate("10-3-2")
        9
    """
    return parse(text).eval(())


class Template:
    """
    A compiled operand template such as "[1] [0]" or "[0]-128 1".

    The text is split on whitespace into one expression per operand. Each
    expression is compiled once; evaluating the template substitutes the
    lookahead bytes for the placeholders.
    """

    def __init__(self, text: str):
        self.text = text
        self.parts = tuple(parse(part) for part in text.split())

    def __len__(self) -> int:
        return len(self.parts)

    def placeholders(self) -> set[int]:
        """Lookahead byte indexes referenced by this template."""
        used: set[int] = set()
        for part in self.parts:
            used |= part.placeholders()
        return used

    def evaluate(self, lookahead: tuple) -> tuple[int, ...]:
        """
        Evaluate every operand against the lookahead bytes.

        Args:
            lookahead: Up to three byte values (None past the end of input)

        Returns:
            One integer per operand
        """
        return tuple(part.eval(lookahead) for part in self.parts)

    def value(self, lookahead: tuple) -> int:
        """Evaluate a template that holds exactly one operand."""
        if len(self.parts) != 1:
            raise MalformedExpressionError(
                f"Expected a single value in {self.text!r}, got {len(self.parts)}"
            )
        return self.parts[0].eval(lookahead)

    def __repr__(self) -> str:
        return f"Template({self.text!r})"
