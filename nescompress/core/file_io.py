"""
NES Compress - File Input and Output

Parses the "path[:offset[:length]]" file syntax used on the command line and
writes results either to a fresh file or into an existing file (such as a
ROM) at an offset.
"""

from dataclasses import dataclass
from pathlib import Path

from ..formats.hex_utils import parse_int


@dataclass(frozen=True)
class FileSpec:
    """A file path with an optional byte offset and length (0 = unset)."""

    path: str
    offset: int = 0
    length: int = 0

    def read_all(self) -> bytes:
        """Read the whole file, ignoring offset and length."""
        with open(self.path, "rb") as f:
            return f.read()

    def read(self) -> bytes:
        """
        Read the bytes selected by offset and length.

        A length of 0 reads to the end of the file.

        Raises:
            ValueError: If the offset is past the end of the file
        """
        data = self.read_all()
        if self.offset > len(data):
            raise ValueError(
                f"Offset 0x{self.offset:X} is past the end of {self.path} "
                f"({len(data)} bytes)"
            )
        end = self.offset + self.length if self.length else len(data)
        return data[self.offset : end]

    def write_target(self) -> "WriteTarget":
        """Fresh file when no offset or length was given, otherwise a patch."""
        if self.offset == 0 and self.length == 0:
            return Fresh(self.path)
        return PatchInto(self.path, self.offset, self.length)


def parse_file_spec(text: str) -> FileSpec:
    """
    Parse "path", "path:offset" or "path:offset:length".

    Offset and length accept decimal, 0x-hex and $-hex. Only trailing
    components that parse as numbers are taken, so paths with a drive
    letter ("C:\\roms\\game.nes:0xb580") keep their colon.

    Args:
        text: File specification

    Returns:
        Parsed FileSpec

    Raises:
        ValueError: If the path part is empty
    """
    parts = text.split(":")
    numbers: list[int] = []
    while len(parts) > 1 and len(numbers) < 2:
        try:
            numbers.insert(0, parse_int(parts[-1]))
        except ValueError:
            break
        parts.pop()

    path = ":".join(parts)
    if not path:
        raise ValueError(f"Missing file name in {text!r}")

    offset = numbers[0] if numbers else 0
    length = numbers[1] if len(numbers) > 1 else 0
    return FileSpec(path, offset, length)


@dataclass(frozen=True)
class Fresh:
    """Create (or replace) the file with exactly the written bytes."""

    path: str


@dataclass(frozen=True)
class PatchInto:
    """Splice bytes into an existing file at offset, at most max_length (0 = all)."""

    path: str
    offset: int
    max_length: int = 0


WriteTarget = Fresh | PatchInto


def write_output(target: WriteTarget, data: bytes) -> int:
    """
    Write data to a target.

    Patching extends the file with zero bytes if the splice starts or runs
    past its current end.

    Args:
        target: Fresh or PatchInto
        data: Bytes to write

    Returns:
        Number of bytes written

    Raises:
        FileNotFoundError: If a PatchInto target does not exist
    """
    if isinstance(target, Fresh):
        Path(target.path).write_bytes(data)
        return len(data)

    chunk = data[: target.max_length] if target.max_length else data
    with open(target.path, "rb") as f:
        contents = bytearray(f.read())

    end = target.offset + len(chunk)
    if end > len(contents):
        contents.extend(bytes(end - len(contents)))
    contents[target.offset : end] = chunk

    Path(target.path).write_bytes(contents)
    return len(chunk)
