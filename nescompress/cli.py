#!/usr/bin/env python3
"""
NES Compress - Command Line Interface

Compress or decompress PPU data (nametables, palettes) stored in NES games.

Options also accept the colon form used by earlier releases, e.g.
"--decompress:game.nes:0xb580" is the same as "--decompress=game.nes:0xb580".
"""

import argparse
import json
import sys

from . import APP_NAME, __version__, app_info
from .core.compressor import ENCODERS, compress
from .core.decompressor import DecodeStats, Decompressor
from .core.errors import InvalidOperationError, NesCompressError
from .core.file_io import Fresh, parse_file_spec, write_output
from .core.formats import DEFAULT_CATALOG
from .core.ppu import DEFAULT_PPU_ADDRESS, get_region, parse_ppu_address
from .formats.hex_utils import format_hex_rows, parse_byte, parse_int
from .rendering.pil_renderer import save_preview

DEFAULT_METHOD = "konami2"

# Input bytes shown after an invalid operation
INVALID_DUMP_SIZE = 16

# (flag, short flag, help) for every region the decoder can write out
REGION_OUTPUTS = [
    ("nt0", "-0", "nametable 0"),
    ("nt1", "-1", "nametable 1"),
    ("nt2", "-2", "nametable 2"),
    ("nt3", "-3", "nametable 3"),
    ("att0", None, "attribute table 0"),
    ("att1", None, "attribute table 1"),
    ("att2", None, "attribute table 2"),
    ("att3", None, "attribute table 3"),
    ("chr0", None, "pattern table 0"),
    ("chr1", None, "pattern table 1"),
    ("bkpal", "-b", "background palette"),
    ("spritepal", "-s", "sprite palette"),
    ("ppu", None, "whole 16KB PPU image"),
]


def normalize_argv(argv: list[str]) -> list[str]:
    """
    Rewrite "--flag:value" and "-f:value" into argparse's "=" form.

    Only the first colon is replaced, so "path:offset" values survive.
    """
    normalized = []
    for arg in argv:
        if arg.startswith("-") and ":" in arg:
            name, value = arg.split(":", 1)
            if "=" not in name:
                arg = f"{name}={value}"
        normalized.append(arg)
    return normalized


def byte_arg(text: str) -> int:
    try:
        return parse_byte(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def address_arg(text: str) -> int:
    try:
        return parse_ppu_address(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def pattern_table_arg(text: str) -> int:
    try:
        value = parse_int(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))
    if value not in (0, 1):
        raise argparse.ArgumentTypeError("pattern table must be 0 or 1")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description=f"{app_info()}\n\nCompress or decompress data from NES games.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Valid methods are: {", ".join(DEFAULT_CATALOG.keys())}
Compression supports: {", ".join(ENCODERS)}

File names may end with ":offset" or ":offset:length" (decimal, 0x or $ hex).
Writing to "file:offset" patches the existing file instead of replacing it.

Examples:
  {APP_NAME} -d:"Castlevania III - Dracula's Curse (USA).nes:0xb580" -0:nt0.nam
  {APP_NAME} -c:uncompressed.nam -a:0x2000 -o:compressed.bin
  {APP_NAME} -c:custom.nam -o:"cv3Edit.nes:0xb580"
  {APP_NAME} -d:game.nes:0xd7e6 -m:kemko --preview:screen.png
""",
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("-c", "--compress", metavar="FILE", help="file to compress")
    mode.add_argument("-d", "--decompress", metavar="FILE", help="file to decompress")
    mode.add_argument(
        "-l", "--list", action="store_true", help="list the supported formats and exit"
    )

    parser.add_argument(
        "-m",
        "--method",
        "--mode",
        dest="method",
        default=DEFAULT_METHOD,
        help=f"compression method (default: {DEFAULT_METHOD})",
    )
    parser.add_argument(
        "-a",
        "--ppuaddr",
        "--ppuaddress",
        dest="ppuaddr",
        type=address_arg,
        default=DEFAULT_PPU_ADDRESS,
        metavar="ADDRESS",
        help="target PPU address or section name such as nt1, att0 (c)",
    )
    parser.add_argument(
        "-o", "--outputfile", metavar="FILE", help="output file for compressed data (c)"
    )
    parser.add_argument(
        "-f",
        "--fill",
        type=byte_arg,
        default=0,
        metavar="BYTE",
        help="byte used to prefill the nametables before decoding (d)",
    )

    for name, short, description in REGION_OUTPUTS:
        flags = [short, f"--{name}"] if short else [f"--{name}"]
        parser.add_argument(
            *flags, dest=name, metavar="FILE", help=f"output file for {description} (d)"
        )

    parser.add_argument(
        "--preview", metavar="PNG", help="render the decoded nametables to a PNG (d)"
    )
    parser.add_argument(
        "--bgtable",
        type=pattern_table_arg,
        default=0,
        metavar="0|1",
        help="pattern table used by --preview (default: 0) (d)",
    )
    parser.add_argument(
        "--chr", metavar="FILE", help="CHR data used by --preview instead of the PPU image (d)"
    )
    parser.add_argument(
        "--stats", action="store_true", help="print decode statistics as JSON (d)"
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"{app_info()}\nPython {sys.version.split()[0]}",
    )
    return parser


def write_file(spec_text: str, data: bytes):
    """Write data to "path" (new file) or "path:offset[:length]" (patch)."""
    target = parse_file_spec(spec_text).write_target()
    count = write_output(target, data)
    if isinstance(target, Fresh):
        print(f"File created: {target.path}")
    else:
        print(f"File modified: {target.path} ({count} bytes at 0x{target.offset:X})")


def list_formats():
    """Print every format and its decode table."""
    print("Supported formats:")
    print()
    for definition in DEFAULT_CATALOG:
        tag = " (compress/decompress)" if definition.key in ENCODERS else ""
        print(f"  {definition.key:<10} {definition.name}{tag}")
        for operation in definition.operations:
            print(f"      {operation.describe()}")
        print()


def report_stats(stats: DecodeStats, show_json: bool):
    print(f"  Bytes read: {stats.bytes_consumed} (0x{stats.start_offset:X}-0x{stats.end_offset:X})")
    if not stats.end_reached:
        print("  Warning: no end of data marker found")
    for position, description in stats.discouraged_hits:
        print(f"  Warning: discouraged operation at 0x{position:X}: {description.strip()}")
    if stats.skipped_writes:
        first = stats.skipped_addresses[0]
        print(
            f"  Warning: {stats.skipped_writes} writes out of bounds "
            f"(first at 0x{first:04X}), skipped."
        )
    if stats.truncated_copy_at is not None:
        print(f"  Warning: copy at 0x{stats.truncated_copy_at:X} ran past the end of input")
    if show_json:
        print(json.dumps(stats.to_dict(), indent=2))


def run_decompress(args) -> int:
    spec = parse_file_spec(args.decompress)
    definition = DEFAULT_CATALOG.get(args.method)

    print(f"Decompressing from file: {spec.path} ({definition.name})...")
    data = spec.read_all()
    if spec.length:
        data = data[: spec.offset + spec.length]
    if spec.offset >= len(data):
        print(f"  Warning: offset 0x{spec.offset:X} is past the end of the data")

    stats = DecodeStats()
    status = 0
    try:
        ppu = Decompressor(definition).decompress(data, spec.offset, args.fill, stats)
    except InvalidOperationError as e:
        print(f"Error: {e}", file=sys.stderr)
        window = data[e.position : e.position + INVALID_DUMP_SIZE]
        for i, row in enumerate(format_hex_rows(window, width=8)):
            print(f"  0x{e.position + i * 8:X}: {row}", file=sys.stderr)
        ppu = e.ppu
        status = 1

    report_stats(stats, args.stats)

    # Regions are still written after an invalid operation
    for name, _short, _description in REGION_OUTPUTS:
        target = getattr(args, name)
        if target:
            write_file(target, get_region(ppu, name))

    if args.preview:
        chr_data = parse_file_spec(args.chr).read() if args.chr else None
        save_preview(args.preview, ppu, chr_data, args.bgtable)
        print(f"File created: {args.preview}")

    return status


def run_compress(args) -> int:
    spec = parse_file_spec(args.compress)

    print(f"Compressing from file: {spec.path}...")
    data = spec.read()
    compressed = compress(args.method, data, args.ppuaddr)

    print(f"  Uncompressed size: {len(data)} bytes")
    print(f"  Compressed size: {len(compressed)} bytes")
    print(f"  Target PPU Address: 0x{args.ppuaddr:04X}")

    if args.outputfile:
        write_file(args.outputfile, compressed)
    else:
        print("  Warning: no output file given (-o), nothing written")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(normalize_argv(sys.argv[1:] if argv is None else argv))

    if args.list:
        list_formats()
        return 0

    if not args.compress and not args.decompress:
        parser.error("one of -c/--compress or -d/--decompress is required")

    print(f"{APP_NAME} {__version__}")
    try:
        if args.decompress:
            status = run_decompress(args)
        else:
            status = run_compress(args)
    except FileNotFoundError as e:
        print(f"Error: file not found: {e.filename}", file=sys.stderr)
        return 1
    except (NesCompressError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("Done.")
    return status


if __name__ == "__main__":
    sys.exit(main())
