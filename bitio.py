"""
Bit-level packing over byte streams.

Bits are packed MSB-first: the first bit written lands in bit position 7 of
the output byte. Any stream object with ``write(bytes)`` / ``read(n)`` works
(open binary files, io.BytesIO).
"""

from typing import BinaryIO


class EndOfStream(EOFError):
    """Raised by BitReader when no more bits can be fetched."""


class BitWriter:
    def __init__(self, stream: BinaryIO):
        self.stream = stream
        self.buffer = 0     # pending bits, MSB-first
        self.bit_count = 0  # bits currently in buffer (0..7)
        self.bits_written = 0
        self.closed = False

    def write_bit(self, bit: int) -> None:
        if self.closed:
            raise ValueError("write to a flushed BitWriter")
        if bit not in (0, 1):
            raise ValueError(f"bit must be 0 or 1, got {bit!r}")
        self.buffer |= bit << (7 - self.bit_count)
        self.bit_count += 1
        self.bits_written += 1
        if self.bit_count == 8:
            self.stream.write(bytes((self.buffer,)))
            self.buffer = 0
            self.bit_count = 0

    def write_bits(self, bits: str) -> None:
        """Write a code given as a string of '0'/'1' characters."""
        for ch in bits:
            self.write_bit(int(ch))

    @property
    def pad_bits(self) -> int:
        return (8 - self.bit_count) % 8

    def flush(self) -> None:
        # low bits of the last byte stay zero; readers stop on symbol count, not length
        if self.closed:
            return
        if self.bit_count > 0:
            self.stream.write(bytes((self.buffer,)))
            self.buffer = 0
            self.bit_count = 0
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.flush()
        return False


class BitReader:
    def __init__(self, stream: BinaryIO):
        self.stream = stream
        self.buffer = 0
        self.bit_count = 0 # unread bits left in buffer (0..8)
        self.bits_read = 0

    def read_bit(self) -> int:
        if self.bit_count == 0:
            byte = self.stream.read(1)
            if not byte:
                raise EndOfStream("bitstream exhausted")
            self.buffer = byte[0]
            self.bit_count = 8
        self.bit_count -= 1
        self.bits_read += 1
        return (self.buffer >> self.bit_count) & 1

