"""Stream views over a gap buffer.

The views keep no state of their own: reads, writes and seeks all go through
the buffer's point, so any number of views can share one buffer and be thrown
away without affecting it.
"""
import io
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .buffer import GapBuffer


class GapBufferWriter:
    """Sequential writer inserting at the point."""

    def __init__(self, buffer: "GapBuffer"):
        self.buffer = buffer

    def write(self, data: bytes) -> int:
        """Insert ``data`` at the point.

        Returns:
            Number of bytes written (always ``len(data)``)

        Raises:
            MemoryError: If the buffer cannot grow
        """
        self.buffer.insert(data)
        return len(data)

    def writelines(self, lines: Iterable[bytes]) -> int:
        """Write each item of ``lines`` in order and return the total written."""
        return sum(self.write(line) for line in lines)

    def print(self, fmt: str, *args) -> int:
        """Write ``fmt % args`` encoded as UTF-8.

        Returns:
            Number of bytes written
        """
        text = fmt % args if args else fmt
        return self.write(text.encode("utf-8"))


class GapBufferReader:
    """Sequential reader copying logical bytes from the point onward."""

    def __init__(self, buffer: "GapBuffer"):
        self.buffer = buffer

    def readinto(self, b) -> int:
        """Fill ``b`` with bytes starting at the point and advance the point.

        Stops short at the end of the content. Never fails.

        Args:
            b: Writable bytes-like object

        Returns:
            Number of bytes copied, 0 at end of content
        """
        buf = self.buffer
        storage = buf._storage
        view = memoryview(b).cast("B")
        wanted = len(view)
        copied = 0

        if wanted == 0:
            return 0

        if buf.point_pos < buf.gap_start:
            n = min(buf.gap_start - buf.point_pos, wanted)
            view[:n] = storage[buf.point_pos:buf.point_pos + n]
            buf.point_pos += n
            copied = n

        if copied < wanted:
            if buf.point_pos == buf.gap_start:
                buf.point_pos = buf.gap_end
            n = min(len(storage) - buf.point_pos, wanted - copied)
            view[copied:copied + n] = storage[buf.point_pos:buf.point_pos + n]
            buf.point_pos += n
            copied += n

        return copied

    def read(self, size: Optional[int] = -1) -> bytes:
        """Read up to ``size`` bytes (everything left if negative or None)."""
        remaining = self.buffer.length() - self.buffer.point()
        if size is None or size < 0 or size > remaining:
            size = remaining
        out = bytearray(size)
        n = self.readinto(out)
        return bytes(out[:n])

    def read_all(self) -> bytes:
        """Read from the point to the end of the content."""
        return self.read(-1)

    def iter_chunks(self, chunk_size: int = 8192) -> Iterator[bytes]:
        """Read the rest of the content in chunks.

        Args:
            chunk_size: Size of each chunk (default 8KB)

        Yields:
            Chunks of content, the last one possibly shorter
        """
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be > 0, got {chunk_size}")
        while True:
            chunk = self.read(chunk_size)
            if not chunk:
                break
            yield chunk


class GapBufferSeeker:
    """Random-access positioning of the point.

    Targets outside ``[0, length()]`` are clamped, never rejected.
    """

    def __init__(self, buffer: "GapBuffer"):
        self.buffer = buffer

    def seek_to(self, pos: int):
        self.buffer.set_point(pos)

    def seek_by(self, delta: int):
        target = self.buffer.point() + delta
        self.buffer.set_point(min(max(target, 0), self.buffer.length()))

    def get_pos(self) -> int:
        return self.buffer.point()

    def get_end_pos(self) -> int:
        return self.buffer.length()


class GapBufferIO(io.RawIOBase):
    """Binary file-like object over a gap buffer.

    Reading, writing and seeking all act on the buffer's point, so this can be
    handed to any code that expects a seekable binary stream. Writes insert
    rather than overwrite. Closing the stream leaves the buffer untouched.
    """

    def __init__(self, gap_buffer: "GapBuffer"):
        super().__init__()
        self.gap_buffer = gap_buffer
        self._reader = GapBufferReader(gap_buffer)
        self._writer = GapBufferWriter(gap_buffer)

    def readable(self) -> bool:
        return True

    def writable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def read(self, size: Optional[int] = -1) -> bytes:
        self._check_open()
        return self._reader.read(size)

    def readinto(self, b) -> int:
        self._check_open()
        return self._reader.readinto(b)

    def write(self, b) -> int:
        self._check_open()
        return self._writer.write(bytes(b))

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        """Move the point and return its new position.

        Args:
            offset: Byte offset
            whence: Reference point (0=start, 1=current, 2=end)
        """
        self._check_open()
        if whence == io.SEEK_SET:
            target = offset
        elif whence == io.SEEK_CUR:
            target = self.gap_buffer.point() + offset
        elif whence == io.SEEK_END:
            target = self.gap_buffer.length() + offset
        else:
            raise ValueError(f"Invalid whence ({whence})")

        self.gap_buffer.set_point(min(max(target, 0), self.gap_buffer.length()))
        return self.gap_buffer.point()

    def tell(self) -> int:
        self._check_open()
        return self.gap_buffer.point()

    def _check_open(self):
        if self.closed:
            raise ValueError("I/O operation on closed stream")
