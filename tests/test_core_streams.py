"""Tests for the stream views over a gap buffer."""
import io
import shutil

import pytest
from gap_buffer.core.buffer import GapBuffer
from gap_buffer.core.streams import (
    GapBufferIO,
    GapBufferReader,
    GapBufferSeeker,
    GapBufferWriter,
)
from hypothesis import given
from hypothesis import strategies as st


def buffer_with_gap_at(data: bytes, at: int) -> GapBuffer:
    """Build a buffer holding ``data`` with the gap sitting at ``at``."""
    buf = GapBuffer.from_bytes(data)
    buf.set_point(at)
    buf.insert(b"")
    return buf


class TestGapBufferWriter:
    """Test the sequential writer."""

    def test_write_inserts_at_point(self) -> None:
        """Test writes land at the point and advance it."""
        buf = GapBuffer.from_bytes(b"world")
        writer = buf.writer()

        assert isinstance(writer, GapBufferWriter)
        assert writer.write(b"hello ") == 6
        assert buf.content() == b"hello world"
        assert buf.point() == 6

    def test_writelines(self) -> None:
        """Test writing several chunks."""
        buf = GapBuffer()
        written = buf.writer().writelines([b"one\n", b"two\n", b"three\n"])

        assert written == 14
        assert buf.content() == b"one\ntwo\nthree\n"

    def test_print(self) -> None:
        """Test formatted writes."""
        buf = GapBuffer()
        writer = buf.writer()

        assert writer.print("very long text printed!") == 23
        assert writer.print(" %s %d", "items:", 3) == 9
        assert buf.content() == b"very long text printed! items: 3"

    def test_print_encodes_utf8(self) -> None:
        """Test text is encoded before insertion."""
        buf = GapBuffer()
        assert buf.writer().print("café") == 5
        assert buf.content() == "café".encode("utf-8")

    def test_write_propagates_memory_error(self) -> None:
        """Test allocation failure surfaces from write."""
        buf = GapBuffer(initial_gap=4, max_capacity=8)
        with pytest.raises(MemoryError):
            buf.writer().write(b"x" * 16)
        assert buf.content() == b""


class TestGapBufferReader:
    """Test the sequential reader."""

    def test_read_full_content(self) -> None:
        """Test reading everything from the start."""
        buf = buffer_with_gap_at(b"hello world", 5)
        buf.set_point(0)
        reader = buf.reader()

        assert isinstance(reader, GapBufferReader)
        into = bytearray(100)
        assert reader.readinto(into) == 11
        assert bytes(into[:11]) == b"hello world"
        assert buf.point() == 11

    def test_read_at_end_returns_zero(self) -> None:
        """Test reads at the end return nothing."""
        buf = GapBuffer.from_bytes(b"abc")
        buf.set_point(3)

        assert buf.reader().readinto(bytearray(10)) == 0
        assert buf.reader().read(5) == b""

    def test_read_skips_gap_at_point(self) -> None:
        """Test a point at the gap start reads from after the gap."""
        buf = GapBuffer.from_bytes(b"hello world")
        buf.set_point(5)
        buf.insert(b",")

        assert buf.point_pos == buf.gap_start
        assert buf.reader().read(3) == b" wo"
        assert buf.point() == 9
        assert buf.content() == b"hello, world"

    def test_small_reads_cross_gap(self) -> None:
        """Test consecutive short reads stitch the content together."""
        buf = buffer_with_gap_at(b"abcdefgh", 3)
        buf.set_point(0)
        reader = buf.reader()

        assert reader.read(2) == b"ab"
        assert reader.read(2) == b"cd"
        assert reader.read(10) == b"efgh"
        assert reader.read(1) == b""

    def test_edit_after_read_past_gap(self) -> None:
        """Test editing after a read left the point at the gap end."""
        buf = GapBuffer.from_bytes(b"abc")
        buf.set_point(3)

        assert buf.reader().read(5) == b""
        assert buf.point_pos == buf.gap_end
        assert buf.point() == 3

        buf.insert(b"d")
        assert buf.content() == b"abcd"
        buf.set_point(1)
        buf.reader().read(1)
        assert buf.delete_backward(1) == 1
        assert buf.content() == b"acd"
        assert buf.point() == 1

    def test_oversized_read_clamps(self) -> None:
        """Test a huge request returns what is left instead of failing."""
        buf = buffer_with_gap_at(b"abcdef", 2)
        buf.set_point(1)

        assert buf.reader().read(2**62) == b"bcdef"
        assert buf.point() == 6
        assert buf.reader().read(2**62) == b""

    def test_read_all(self) -> None:
        """Test reading the rest from the current point."""
        buf = buffer_with_gap_at(b"0123456789", 4)
        buf.set_point(2)
        assert buf.reader().read_all() == b"23456789"
        assert buf.point() == 10

    def test_read_zero(self) -> None:
        """Test a zero-length read leaves the point alone."""
        buf = buffer_with_gap_at(b"abc", 1)
        buf.set_point(1)
        before = buf.point_pos

        assert buf.reader().read(0) == b""
        assert buf.point_pos == before

    def test_iter_chunks(self) -> None:
        """Test chunked iteration over the rest of the content."""
        buf = buffer_with_gap_at(b"hello, world", 7)
        buf.set_point(0)

        chunks = list(buf.reader().iter_chunks(5))
        assert chunks == [b"hello", b", wor", b"ld"]

    def test_iter_chunks_invalid_size(self) -> None:
        """Test non-positive chunk sizes are rejected."""
        with pytest.raises(ValueError):
            list(GapBuffer().reader().iter_chunks(0))

    @given(
        data=st.binary(max_size=300),
        gap_at=st.integers(min_value=0, max_value=300),
        start=st.integers(min_value=0, max_value=300),
        chunk_size=st.integers(min_value=1, max_value=64),
    )
    def test_property_chunks_reassemble(
        self, data: bytes, gap_at: int, start: int, chunk_size: int
    ) -> None:
        """Reading all chunks from a point gives the content from that point."""
        buf = buffer_with_gap_at(data, gap_at)
        buf.set_point(start)
        expected = data[min(start, len(data)):]

        assert b"".join(buf.reader().iter_chunks(chunk_size)) == expected
        assert buf.point() == len(data)


class TestGapBufferSeeker:
    """Test random-access seeking."""

    def test_positions(self) -> None:
        """Test position queries."""
        buf = GapBuffer.from_bytes(b"0123456789")
        seek = buf.seekable_stream()

        assert isinstance(seek, GapBufferSeeker)
        assert seek.get_pos() == 0
        assert seek.get_end_pos() == 10

        seek.seek_to(7)
        assert seek.get_pos() == 7

    def test_seek_by_clamps(self) -> None:
        """Test relative seeks saturate at both ends."""
        buf = GapBuffer.from_bytes(b"0123456789")
        seek = buf.seekable_stream()
        seek.seek_to(5)

        seek.seek_by(-100)
        assert seek.get_pos() == 0

        seek.seek_by(3)
        assert seek.get_pos() == 3

        seek.seek_by(100)
        assert seek.get_pos() == 10

    def test_seek_to_clamps(self) -> None:
        """Test absolute seeks past the end land at the end."""
        buf = GapBuffer.from_bytes(b"abc")
        seek = buf.seekable_stream()

        seek.seek_to(40)
        assert seek.get_pos() == 3

    def test_views_share_point(self) -> None:
        """Test views are stateless and share the buffer's point."""
        buf = GapBuffer.from_bytes(b"abcdef")
        buf.seekable_stream().seek_to(2)
        assert buf.reader().read(2) == b"cd"
        buf.writer().write(b"-")

        assert buf.content() == b"abcd-ef"
        assert buf.seekable_stream().get_pos() == 5

    @given(
        data=st.binary(max_size=100),
        deltas=st.lists(st.integers(min_value=-10**12, max_value=10**12), max_size=20),
    )
    def test_property_seek_by_stays_in_range(self, data: bytes, deltas: list) -> None:
        """No relative seek leaves [0, length()]."""
        buf = buffer_with_gap_at(data, len(data) // 2)
        seek = buf.seekable_stream()

        for delta in deltas:
            seek.seek_by(delta)
            assert 0 <= seek.get_pos() <= seek.get_end_pos()


class TestGapBufferIO:
    """Test the file-like adapter."""

    def test_write_seek_read(self) -> None:
        """Test basic round trip through the file protocol."""
        buf = GapBuffer()
        stream = buf.io()

        assert isinstance(stream, GapBufferIO)
        assert stream.readable() and stream.writable() and stream.seekable()
        assert stream.write(b"abcdef") == 6
        assert stream.tell() == 6
        assert stream.seek(0) == 0
        assert stream.read() == b"abcdef"

    def test_oversized_read_clamps(self) -> None:
        """Test a huge request through the file protocol returns the rest."""
        stream = GapBuffer.from_bytes(b"abc").io()

        assert stream.read(2**62) == b"abc"
        assert stream.tell() == 3
        assert stream.read(2**62) == b""

    def test_read_after_close(self) -> None:
        """Test reading a closed stream is refused."""
        stream = GapBuffer.from_bytes(b"abc").io()
        stream.close()

        with pytest.raises(ValueError, match="closed"):
            stream.read(1)

    def test_seek_whence(self) -> None:
        """Test all three reference points, clamped into range."""
        stream = GapBuffer.from_bytes(b"0123456789").io()

        assert stream.seek(4) == 4
        assert stream.seek(2, io.SEEK_CUR) == 6
        assert stream.seek(-3, io.SEEK_END) == 7
        assert stream.seek(100) == 10
        assert stream.seek(-100, io.SEEK_CUR) == 0

        with pytest.raises(ValueError, match="whence"):
            stream.seek(0, 5)

    def test_readinto_and_partial_reads(self) -> None:
        """Test the raw readinto contract."""
        stream = buffer_with_gap_at(b"hello world", 3).io()
        stream.seek(0)
        into = bytearray(4)

        assert stream.readinto(into) == 4
        assert into == bytearray(b"hell")
        assert stream.read(3) == b"o w"

    def test_write_inserts_rather_than_overwrites(self) -> None:
        """Test writes in the middle push content along."""
        buf = GapBuffer.from_bytes(b"ac")
        stream = buf.io()
        stream.seek(1)
        stream.write(memoryview(b"b"))

        assert buf.content() == b"abc"

    def test_copyfileobj(self) -> None:
        """Test the adapter works with generic stream utilities."""
        buf = GapBuffer()
        shutil.copyfileobj(io.BytesIO(b"x" * 50_000), buf.io())
        assert buf.content() == b"x" * 50_000

        out = io.BytesIO()
        stream = buf.io()
        stream.seek(0)
        shutil.copyfileobj(stream, out)
        assert out.getvalue() == b"x" * 50_000

    def test_close_leaves_buffer(self) -> None:
        """Test closing the stream does not release the buffer."""
        buf = GapBuffer.from_bytes(b"keep")
        with buf.io() as stream:
            stream.seek(0, io.SEEK_END)

        assert stream.closed
        with pytest.raises(ValueError, match="closed"):
            stream.write(b"x")
        assert buf.content() == b"keep"
