import io

import pytest

from bitio import BitReader, BitWriter, EndOfStream


def test_bits_are_packed_msb_first():
    out = io.BytesIO()
    bw = BitWriter(out)
    bw.write_bits("101")
    bw.flush()
    assert out.getvalue() == b"\xa0"


def test_full_byte_is_emitted_before_flush():
    out = io.BytesIO()
    bw = BitWriter(out)
    bw.write_bits("11110000")
    assert out.getvalue() == b"\xf0"
    bw.write_bit(1)
    assert out.getvalue() == b"\xf0"
    assert bw.pad_bits == 7
    bw.flush()
    assert out.getvalue() == b"\xf0\x80"
    assert bw.bits_written == 9


def test_flush_without_pending_bits_writes_nothing():
    out = io.BytesIO()
    bw = BitWriter(out)
    bw.write_bits("00000001")
    bw.flush()
    bw.flush()
    assert out.getvalue() == b"\x01"


def test_write_after_flush_is_rejected():
    bw = BitWriter(io.BytesIO())
    bw.flush()
    with pytest.raises(ValueError):
        bw.write_bit(0)


def test_write_bit_rejects_non_bits():
    bw = BitWriter(io.BytesIO())
    with pytest.raises(ValueError):
        bw.write_bit(2)


def test_context_manager_flushes_on_error():
    out = io.BytesIO()
    with pytest.raises(RuntimeError):
        with BitWriter(out) as bw:
            bw.write_bits("11")
            raise RuntimeError("boom")
    assert out.getvalue() == b"\xc0"
    assert bw.closed


def test_reader_yields_msb_first():
    br = BitReader(io.BytesIO(b"\xa5"))
    assert [br.read_bit() for _ in range(8)] == [1, 0, 1, 0, 0, 1, 0, 1]
    assert br.bits_read == 8


def test_reader_signals_end_only_at_byte_boundary():
    br = BitReader(io.BytesIO(b"\x80\x01"))
    bits = [br.read_bit() for _ in range(16)]
    assert bits[0] == 1 and bits[15] == 1 and sum(bits) == 2
    with pytest.raises(EndOfStream):
        br.read_bit()


def test_end_of_stream_is_eof_error():
    with pytest.raises(EOFError):
        BitReader(io.BytesIO(b"")).read_bit()


def test_writer_output_reads_back():
    pattern = "1101001110001011101"
    out = io.BytesIO()
    with BitWriter(out) as bw:
        bw.write_bits(pattern)
    br = BitReader(io.BytesIO(out.getvalue()))
    assert "".join(str(br.read_bit()) for _ in range(len(pattern))) == pattern


@pytest.mark.parametrize("bits", ["012", "1x", "2"])
def test_write_bits_rejects_non_bit_characters(bits):
    with pytest.raises(ValueError):
        BitWriter(io.BytesIO()).write_bits(bits)
