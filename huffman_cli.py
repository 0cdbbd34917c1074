"""
Command-line front end for the Huffman codec

How to run:
  python huffman_cli.py compress notes.txt notes.huf --show-codes
  python huffman_cli.py decompress notes.huf notes.txt
  python huffman_cli.py sample sample.txt sample.huf
  python huffman_cli.py codes notes.txt
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import codec
from huffman import FrequencyTable, build_huffman_tree, format_code_table, generate_huffman_codes

SAMPLE_TEXT = (
    "This is a sample file for Huffman compression demonstration.\n"
    "You can replace this with any text file.\n"
)


def create_sample_file_if_missing(path: Path) -> bool:
    """Returns True if the file was created, False if it already existed."""
    if path.exists():
        return False
    path.write_text(SAMPLE_TEXT, encoding="utf-8")
    return True


def code_table_for_file(path: Path) -> List[str]:
    table = FrequencyTable()
    with path.open("rb") as f:
        for chunk in codec.read_chunks(f):
            table.update(chunk)
    if table.total == 0:
        raise codec.EmptyInputError(f"{path} is empty")
    return format_code_table(generate_huffman_codes(build_huffman_tree(table)))


def print_stats(stats: codec.CompressionStats) -> None:
    print(f"Original size: {stats.original_size} bytes, Compressed size: {stats.compressed_size} bytes")
    print(f"Space saved: {stats.space_saved_percent:.2f}%")


def cmd_compress(args) -> int:
    print(f"Compressing '{args.input}' -> '{args.output}' ...")
    stats = codec.compress_file(args.input, args.output)
    print("Compression successful.")
    print_stats(stats)
    if args.show_codes:
        print("Huffman Codes (byte -> code):")
        for line in code_table_for_file(Path(args.input)):
            print(line)
    return 0


def cmd_decompress(args) -> int:
    print(f"Decompressing '{args.input}' -> '{args.output}' ...")
    written = codec.decompress_file(args.input, args.output)
    print(f"Decompression successful. Restored {written} bytes.")
    return 0


def cmd_sample(args) -> int:
    sample_path = Path(args.path)
    if create_sample_file_if_missing(sample_path):
        print(f"Created sample file: {sample_path}")
    stats = codec.compress_file(sample_path, args.output)
    print(f"Sample compressed. Original: {stats.original_size}, Compressed: {stats.compressed_size}, "
          f"Saved: {stats.space_saved_percent:.2f}%")
    return 0


def cmd_codes(args) -> int:
    print("Huffman Codes (byte -> code):")
    for line in code_table_for_file(Path(args.input)):
        print(line)
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Static Huffman file compressor")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("compress", help="Compress a file")
    p.add_argument("input", help="File to compress")
    p.add_argument("output", help="Compressed output path (e.g. out.huf)")
    p.add_argument("--show-codes", action="store_true", help="Print the Huffman code table afterwards")
    p.set_defaults(func=cmd_compress)

    p = sub.add_parser("decompress", help="Decompress a file")
    p.add_argument("input", help="Compressed file")
    p.add_argument("output", help="Decompressed output path")
    p.set_defaults(func=cmd_decompress)

    p = sub.add_parser("sample", help="Compress a demo file (created if missing)")
    p.add_argument("path", help="Sample input path (e.g. sample.txt)")
    p.add_argument("output", help="Compressed output path (e.g. sample.huf)")
    p.set_defaults(func=cmd_sample)

    p = sub.add_parser("codes", help="Show the Huffman code table for a file")
    p.add_argument("input", help="File to analyse")
    p.set_defaults(func=cmd_codes)

    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except (codec.CodecError, OSError, ValueError) as e:
        print(f"{args.command.capitalize()} failed: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
