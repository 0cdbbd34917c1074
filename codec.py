"""
Compressed file format and the compress/decompress operations.

Layout of a compressed blob::

    [8 bytes]        total symbol count         (uint64, host byte order)
    [256 * 8 bytes]  frequency of bytes 0..255  (uint64, host byte order)
    [remaining]      packed bitstream, MSB-first, last byte zero-padded

The tree is never stored. The decoder rebuilds it from the frequency table with
the same builder the encoder used, so both sides must run identical code.
Header fields use the host's byte order and are not portable between machines
of differing endianness.
"""

import io
import logging
import os
import struct
from dataclasses import dataclass
from typing import BinaryIO, Dict, List, Union

from bitio import BitReader, BitWriter, EndOfStream
from huffman import (
    ALPHABET_SIZE,
    FrequencyTable,
    HuffmanNode,
    build_huffman_tree,
    count_frequencies,
    generate_huffman_codes,
)

logger = logging.getLogger(__name__)

HEADER_STRUCT = struct.Struct(f"={1 + ALPHABET_SIZE}Q")
HEADER_SIZE = HEADER_STRUCT.size # 2056

CHUNK_SIZE = 64 * 1024

PathLike = Union[str, "os.PathLike[str]"]


class CodecError(Exception):
    """Base class for compress/decompress failures."""


class EmptyInputError(CodecError):
    """Nothing to compress."""


class TreeConstructionError(CodecError):
    """No Huffman tree could be built from the frequency table."""


class TruncatedHeaderError(CodecError):
    """Compressed data is shorter than the fixed header."""


class UnexpectedEndOfStreamError(CodecError):
    """Bitstream ended before every symbol was decoded."""


@dataclass
class CompressedBlob:
    total_symbol_count: int
    frequencies: List[int]
    bitstream: bytes

    @property
    def table(self) -> FrequencyTable:
        return FrequencyTable(self.frequencies)

    def to_bytes(self) -> bytes:
        return write_header(self.total_symbol_count, self.table) + self.bitstream

    @classmethod
    def from_bytes(cls, blob: bytes) -> "CompressedBlob":
        total, table = read_header(io.BytesIO(blob))
        return cls(total, list(table), bytes(blob[HEADER_SIZE:]))


@dataclass
class CompressionStats:
    original_size: int
    compressed_size: int

    @property
    def space_saved_percent(self) -> float:
        if self.original_size == 0:
            return 0.0
        return (1.0 - self.compressed_size / self.original_size) * 100.0


def write_header(total_symbol_count: int, table: FrequencyTable) -> bytes:
    # zero entries are kept so the decoder sees the same heap seeding
    return HEADER_STRUCT.pack(total_symbol_count, *table)


def read_header(stream: BinaryIO):
    raw = stream.read(HEADER_SIZE)
    if len(raw) < HEADER_SIZE:
        raise TruncatedHeaderError(
            f"header needs {HEADER_SIZE} bytes, only {len(raw)} available")
    fields = HEADER_STRUCT.unpack(raw)
    return fields[0], FrequencyTable(fields[1:])


def payload_bit_length(table: FrequencyTable, code_map: Dict[int, str]) -> int:
    return sum(table[value] * len(code) for value, code in code_map.items())


def _build_codes(table: FrequencyTable) -> Dict[int, str]:
    root = build_huffman_tree(table)
    if root is None:
        raise TreeConstructionError("frequency table has no nonzero entries")
    return generate_huffman_codes(root)


def _encode_chunks(chunks, code_map: Dict[int, str], out: BinaryIO) -> int:
    with BitWriter(out) as writer:
        for chunk in chunks:
            for byte in chunk:
                writer.write_bits(code_map[byte])
    return writer.bits_written


def _decode_stream(total: int, table: FrequencyTable, source: BinaryIO, out: BinaryIO) -> None:
    symbols = table.symbols()
    if not symbols:
        if total:
            raise TreeConstructionError(
                f"header claims {total} symbols but every frequency is zero")
        return

    if len(symbols) == 1:
        # a lone leaf has no branches to walk, so the bits are never read
        block = bytes((symbols[0],)) * min(total, CHUNK_SIZE)
        remaining = total
        while remaining:
            n = min(remaining, len(block))
            out.write(block if n == len(block) else block[:n])
            remaining -= n
        return

    root = build_huffman_tree(table)
    reader = BitReader(source)
    decoded = bytearray()
    written = 0
    node: HuffmanNode = root
    try:
        while written < total:
            node = node.right if reader.read_bit() else node.left
            if node.is_leaf():
                decoded.append(node.symbol)
                written += 1
                node = root
                if len(decoded) >= CHUNK_SIZE:
                    out.write(decoded)
                    decoded.clear()
    except EndOfStream:
        raise UnexpectedEndOfStreamError(
            f"bitstream ended after {written} of {total} symbols") from None
    out.write(decoded)


def compress(data: bytes) -> bytes:
    if not data:
        raise EmptyInputError("input is empty, nothing to compress")

    table = count_frequencies(data)
    code_map = _build_codes(table)

    out = io.BytesIO()
    out.write(write_header(table.total, table))
    bits = _encode_chunks((data,), code_map, out)
    logger.debug("compressed %d bytes into %d payload bits over %d symbols",
                 len(data), bits, len(code_map))
    return out.getvalue()


def decompress(blob: bytes) -> bytes:
    source = io.BytesIO(blob)
    total, table = read_header(source)
    out = io.BytesIO()
    _decode_stream(total, table, source, out)
    return out.getvalue()


def read_chunks(stream: BinaryIO):
    while True:
        chunk = stream.read(CHUNK_SIZE)
        if not chunk:
            return
        yield chunk


def _remove_partial(path: PathLike) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass


def _check_distinct(input_path: PathLike, output_path: PathLike) -> None:
    # opening the output for writing would truncate the input before it is read
    if os.path.exists(output_path) and os.path.samefile(input_path, output_path):
        raise ValueError(f"input and output are the same file: {output_path}")


def compress_file(input_path: PathLike, output_path: PathLike) -> CompressionStats:
    """
    Compress ``input_path`` into ``output_path``.

    The input is read twice: once to count frequencies, then again to encode,
    because the header has to precede the bitstream. If encoding fails after
    the output is opened, the partial output file is removed.
    """
    with open(input_path, "rb") as src:
        _check_distinct(input_path, output_path)
        table = FrequencyTable()
        for chunk in read_chunks(src):
            table.update(chunk)
        total = table.total
        if total == 0:
            raise EmptyInputError(f"{input_path} is empty, nothing to compress")
        code_map = _build_codes(table)

        src.seek(0)
        out = open(output_path, "wb")
        try:
            with out:
                out.write(write_header(total, table))
                _encode_chunks(read_chunks(src), code_map, out)
        except Exception:
            _remove_partial(output_path)
            raise

    stats = CompressionStats(total, os.path.getsize(output_path))
    logger.info("compressed %s -> %s (%d -> %d bytes)",
                input_path, output_path, stats.original_size, stats.compressed_size)
    return stats


def decompress_file(input_path: PathLike, output_path: PathLike) -> int:
    """Decompress ``input_path`` into ``output_path``; returns the byte count written."""
    with open(input_path, "rb") as src:
        _check_distinct(input_path, output_path)
        total, table = read_header(src)
        out = open(output_path, "wb")
        try:
            with out:
                _decode_stream(total, table, src, out)
        except Exception:
            _remove_partial(output_path)
            raise

    logger.info("decompressed %s -> %s (%d bytes)", input_path, output_path, total)
    return total
