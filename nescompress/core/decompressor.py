"""
NES Compress - Decompression

Table-driven decoder: walks a format's operation list against the input
bytes and replays the matched operations into a 16KB PPU image.
"""

from typing import Any

from ..formats.hex_utils import format_hex_row
from .errors import InvalidOperationError, MalformedExpressionError
from .operations import FormatDefinition, Operation, OpKind
from .ppu import DEFAULT_PPU_ADDRESS, PPU_SIZE, new_ppu_image

# Keep only the first few skipped addresses; a runaway repeat can skip thousands
MAX_RECORDED_SKIPS = 16


class DecodeStats:
    """
    Collects statistics about a decode run.

    Tracks:
    - Operation usage, keyed by table index
    - Discouraged operations hit, with their input positions
    - Writes skipped because the address ran past $3FFF
    - Copies cut short by the end of input
    """

    def __init__(self):
        # Key: operation index, Value: dict with description and usage_count
        self.op_usage: dict[int, dict[str, Any]] = {}

        # (input position, operation description) pairs
        self.discouraged_hits: list[tuple[int, str]] = []

        self.skipped_writes = 0
        self.skipped_addresses: list[int] = []

        # Input position of the copy that ran out of source bytes
        self.truncated_copy_at: int | None = None

        self.start_offset = 0
        self.end_offset = 0
        self.final_address = DEFAULT_PPU_ADDRESS
        self.end_reached = False

    @property
    def bytes_consumed(self) -> int:
        return self.end_offset - self.start_offset

    def record_operation(self, index: int, operation: Operation, position: int):
        """
        Record that an operation fired.

        Args:
            index: Position of the operation in the format's table
            operation: The operation that matched
            position: Input offset the operation matched at
        """
        if index not in self.op_usage:
            self.op_usage[index] = {"description": operation.describe(), "usage_count": 0}
        self.op_usage[index]["usage_count"] += 1

        if operation.discouraged:
            self.discouraged_hits.append((position, operation.describe()))

    def record_skipped_write(self, address: int):
        """Record a write past the end of PPU memory."""
        self.skipped_writes += 1
        if len(self.skipped_addresses) < MAX_RECORDED_SKIPS:
            self.skipped_addresses.append(address)

    def record_truncated_copy(self, position: int):
        self.truncated_copy_at = position

    def to_dict(self) -> dict[str, Any]:
        """
        Convert statistics to JSON-serializable dictionary.

        Returns:
            Dictionary with all statistics in JSON-friendly format
        """
        return {
            "start_offset": f"0x{self.start_offset:X}",
            "end_offset": f"0x{self.end_offset:X}",
            "bytes_consumed": self.bytes_consumed,
            "final_address": f"0x{self.final_address:04X}",
            "end_reached": self.end_reached,
            "operations": [
                {
                    "index": index,
                    "description": data["description"],
                    "usage_count": data["usage_count"],
                }
                for index, data in sorted(self.op_usage.items())
            ],
            "discouraged_operations": [
                {"offset": f"0x{position:X}", "description": description}
                for position, description in self.discouraged_hits
            ],
            "skipped_writes": {
                "total_count": self.skipped_writes,
                "first_addresses": [f"0x{a:04X}" for a in self.skipped_addresses],
            },
            "truncated_copy_at": (
                None if self.truncated_copy_at is None else f"0x{self.truncated_copy_at:X}"
            ),
        }

    def merge(self, other: "DecodeStats"):
        """
        Merge counters from another DecodeStats instance.

        Offsets and the final address are left alone; they describe one run.

        Args:
            other: Another DecodeStats instance to merge
        """
        for index, data in other.op_usage.items():
            if index not in self.op_usage:
                self.op_usage[index] = {"description": data["description"], "usage_count": 0}
            self.op_usage[index]["usage_count"] += data["usage_count"]

        self.discouraged_hits.extend(other.discouraged_hits)
        self.skipped_writes += other.skipped_writes
        room = MAX_RECORDED_SKIPS - len(self.skipped_addresses)
        self.skipped_addresses.extend(other.skipped_addresses[:room])
        if self.truncated_copy_at is None:
            self.truncated_copy_at = other.truncated_copy_at
        self.end_reached = self.end_reached or other.end_reached


class Decompressor:
    """Decodes data in one format into a PPU image."""

    def __init__(self, definition: FormatDefinition):
        """
        Args:
            definition: Format whose operation table drives the decode
        """
        self.definition = definition

    def decompress(
        self,
        data: bytes,
        offset: int = 0,
        fill: int = 0,
        stats: DecodeStats | None = None,
    ) -> bytearray:
        """
        Decompress data starting at offset.

        Writes outside $0000-$3FFF are skipped. They are only reported
        through stats; without a collector the skips leave no trace.

        Args:
            data: Buffer holding the compressed stream (e.g., a whole ROM)
            offset: Position of the first compressed byte
            fill: Byte used to prefill the nametable tile areas
            stats: Optional DecodeStats instance to collect statistics

        Returns:
            16KB PPU image

        Raises:
            InvalidOperationError: If the bytes at the cursor match no operation.
                The partially decoded image is attached to the exception.
            MalformedExpressionError: If a template fails to evaluate, or an
                operation that is neither a start rule nor the end marker does
                not consume any input
        """
        if offset < 0:
            raise ValueError(f"Offset must not be negative, got {offset}")

        ppu = new_ppu_image(fill)
        operations = self.definition.operations

        position = offset
        address = DEFAULT_PPU_ADDRESS
        at_start = True
        finished = False

        if stats is not None:
            stats.start_offset = offset

        while position < len(data) and not finished:
            lookahead = self._lookahead(data, position)
            fired = False
            index = 0

            while index < len(operations):
                operation = operations[index]
                if not operation.matches(lookahead, at_start):
                    index += 1
                    continue

                fired = True
                at_start = False
                if stats is not None:
                    stats.record_operation(index, operation, position)

                size = operation.size.value(lookahead)
                if size <= 0 and not operation.requires_start and operation.kind != OpKind.END:
                    # Only start rules and the end marker may leave the cursor in place
                    raise MalformedExpressionError(
                        f"Operation {operation.pattern()} at offset 0x{position:X} has size "
                        f"{size}; it must consume at least one byte"
                    )
                step = operation.address_step.value(lookahead)

                if operation.kind == OpKind.ADDRESS:
                    address = operation.operand.value(lookahead)

                elif operation.kind == OpKind.REPEAT:
                    value, count = operation.operand.evaluate(lookahead)
                    for _ in range(count):
                        self._write(ppu, address, value & 0xFF, stats)
                        address += step

                elif operation.kind == OpKind.COPY:
                    count, relative = operation.operand.evaluate(lookahead)
                    for j in range(count):
                        src = position + j + relative
                        if src >= len(data):
                            # Ran out of input mid-copy: treat as end of data
                            if stats is not None:
                                stats.record_truncated_copy(position)
                            finished = True
                            break
                        self._write(ppu, address, data[src], stats)
                        address += step

                else:
                    finished = True
                    if stats is not None:
                        stats.end_reached = True

                position += size

                if finished or not operation.no_break:
                    break

                # Keep scanning the rest of the table at the new cursor
                lookahead = self._lookahead(data, position)
                index += 1

            if not fired:
                if stats is not None:
                    stats.end_offset = position
                    stats.final_address = address
                raise InvalidOperationError(
                    f"Invalid operation at offset 0x{position:X}: "
                    f"{format_hex_row(lookahead)} matches no {self.definition.name} operation",
                    position=position,
                    lookahead=lookahead,
                    ppu=ppu,
                )

        if stats is not None:
            stats.end_offset = position
            stats.final_address = address

        return ppu

    @staticmethod
    def _lookahead(data: bytes, position: int) -> tuple:
        # None stands in for bytes past the end of input
        return tuple(
            data[position + i] if 0 <= position + i < len(data) else None for i in range(3)
        )

    @staticmethod
    def _write(ppu: bytearray, address: int, value: int, stats: DecodeStats | None):
        if 0 <= address < PPU_SIZE:
            ppu[address] = value
        elif stats is not None:
            stats.record_skipped_write(address)


def decompress(
    definition: FormatDefinition,
    data: bytes,
    offset: int = 0,
    fill: int = 0,
    stats: DecodeStats | None = None,
) -> bytearray:
    """
    Decompress data with the given format. See Decompressor.decompress.

    Out-of-bounds writes are skipped silently unless stats is given.
    """
    return Decompressor(definition).decompress(data, offset, fill, stats)
