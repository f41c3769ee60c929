"""Gap buffer core for cheap localized edits around a moving point."""
import logging
from contextlib import nullcontext
from typing import Optional

from .monitor import PerformanceMonitor
from .streams import GapBufferIO, GapBufferReader, GapBufferSeeker, GapBufferWriter

logger = logging.getLogger(__name__)

INIT_GAP_SIZE = 20
GROWTH_DIVISOR = 64


def copy_forwards(buf: bytearray, dest: int, src: int, count: int,
                  monitor: Optional[PerformanceMonitor] = None):
    """Copy ``count`` bytes from ``src`` to ``dest`` inside ``buf``, low to high.

    Safe for overlapping ranges where the destination precedes the source.
    """
    assert dest <= src, f"forward copy needs dest <= src ({dest} > {src})"
    assert 0 <= dest and src + count <= len(buf)
    if count == 0:
        return
    buf[dest:dest + count] = buf[src:src + count]
    if monitor is not None:
        monitor.record_copy(count)


def copy_backwards(buf: bytearray, dest: int, src: int, count: int,
                   monitor: Optional[PerformanceMonitor] = None):
    """Copy ``count`` bytes from ``src`` to ``dest`` inside ``buf``, high to low.

    Safe for overlapping ranges where the destination follows the source.
    """
    assert dest >= src, f"backward copy needs dest >= src ({dest} < {src})"
    assert 0 <= src and dest + count <= len(buf)
    if count == 0:
        return
    buf[dest:dest + count] = buf[src:src + count]
    if monitor is not None:
        monitor.record_copy(count)


class GapBuffer:
    """Mutable byte container keeping a free region ("gap") at the edit point.

    Storage is laid out as ``[text before gap][gap][text after gap]``. Edits
    relocate the gap to the point first, so the cost of an edit is
    proportional to how far the point moved since the previous edit rather
    than to the buffer length.

    All positions are byte offsets. Nothing here is aware of character
    encodings; moving the point into the middle of a multi-byte sequence is
    allowed and left to the caller to avoid.

    Not thread safe. Callers sharing a buffer must serialize access.
    """

    def __init__(self, initial_gap: int = INIT_GAP_SIZE,
                 growth_divisor: int = GROWTH_DIVISOR,
                 max_capacity: Optional[int] = None,
                 monitor: Optional[PerformanceMonitor] = None):
        """Initialize an empty buffer.

        Args:
            initial_gap: Bytes pre-allocated for the gap (default 20)
            growth_divisor: Growth amortization factor; a full gap grows by at
                least ``length() // growth_divisor`` bytes
            max_capacity: Upper bound on raw storage size (None for unbounded)
            monitor: Optional monitor receiving byte-copy counts

        Raises:
            ValueError: If a setting is out of range
            MemoryError: If ``initial_gap`` exceeds ``max_capacity``
        """
        if initial_gap < 0:
            raise ValueError(f"initial_gap must be >= 0, got {initial_gap}")
        if growth_divisor < 1:
            raise ValueError(f"growth_divisor must be >= 1, got {growth_divisor}")
        if max_capacity is not None and max_capacity < 0:
            raise ValueError(f"max_capacity must be >= 0, got {max_capacity}")

        self.initial_gap = initial_gap
        self.growth_divisor = growth_divisor
        self.max_capacity = max_capacity
        self.monitor = monitor

        self._check_capacity(initial_gap)
        self._storage = bytearray(initial_gap)
        self.gap_start = 0
        self.gap_end = initial_gap
        self.point_pos = 0

    @classmethod
    def from_bytes(cls, data: bytes, **kwargs) -> "GapBuffer":
        """Create a buffer holding ``data`` with the point at the start.

        Args:
            data: Initial content
            **kwargs: Passed through to the constructor
        """
        buf = cls(**kwargs)
        buf.insert(data)
        buf.set_point(0)
        return buf

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    def __len__(self) -> int:
        return self.length()

    def __bytes__(self) -> bytes:
        return self.content()

    def __repr__(self) -> str:
        return (f"<{self.__class__.__name__} len={self.length()} "
                f"cap={len(self._storage)} gap={self.gap_start}-{self.gap_end} "
                f"point={self.point()}>")

    def gap_size(self) -> int:
        return self.gap_end - self.gap_start

    def length(self) -> int:
        """Logical text length, excluding the gap."""
        return len(self._storage) - self.gap_size()

    def capacity(self) -> int:
        """Raw storage size, including the gap."""
        return len(self._storage)

    def point(self) -> int:
        """Logical cursor offset."""
        assert self.point_pos <= self.gap_start or self.point_pos >= self.gap_end
        if self.point_pos <= self.gap_start:
            return self.point_pos
        return self.point_pos - self.gap_size()

    def set_point(self, position: int):
        """Move the logical cursor without touching storage.

        Positions past the end clamp to the end, negative positions to 0.
        """
        position = max(position, 0)
        if position <= self.gap_start:
            self.point_pos = position
        elif position < self.length():
            self.point_pos = position + self.gap_size()
        else:
            self.point_pos = self.length() + self.gap_size()

    def content(self) -> bytes:
        """Return the full logical text."""
        return bytes(self._storage[:self.gap_start] + self._storage[self.gap_end:])

    def text(self, start: int = 0, end: Optional[int] = None) -> bytes:
        """Return logical bytes in ``[start, end)``, clamped to the content.

        Args:
            start: Starting logical offset
            end: Ending logical offset (None for end of content)
        """
        length = self.length()
        start = min(max(start, 0), length)
        end = length if end is None else min(max(end, start), length)

        parts = []
        if start < self.gap_start:
            parts.append(self._storage[start:min(end, self.gap_start)])
        if end > self.gap_start:
            size = self.gap_size()
            parts.append(self._storage[max(start, self.gap_start) + size:end + size])
        return b"".join(parts)

    def insert(self, data: bytes):
        """Insert ``data`` at the point, leaving the point after it.

        No validation of the content is done.

        Raises:
            MemoryError: If the gap has to grow past ``max_capacity``
        """
        with self._measure("insert"):
            self._move_gap_to_point()
            if self.gap_size() <= len(data):
                self.grow_gap(max(len(data), self.length() // self.growth_divisor))
            self.insert_assume_capacity(data)

    def insert_assume_capacity(self, data: bytes):
        """Insert at the gap start, which must coincide with the point.

        The gap must already be large enough to hold ``data``.
        """
        size = len(data)
        assert size <= self.gap_size()
        assert self.point_pos == self.gap_start
        self._storage[self.gap_start:self.gap_start + size] = data
        self.gap_start += size
        self.point_pos = self.gap_start

    def delete_forward(self, count: int) -> int:
        """Delete up to ``count`` bytes after the point.

        Returns:
            Number of bytes actually deleted
        """
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        with self._measure("delete_forward"):
            self._move_gap_to_point()
            old_end = self.gap_end
            self.gap_end = min(self.gap_end + count, len(self._storage))
        return self.gap_end - old_end

    def delete_backward(self, count: int) -> int:
        """Delete up to ``count`` bytes before the point.

        The point moves back by the number of bytes deleted.

        Returns:
            Number of bytes actually deleted
        """
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        with self._measure("delete_backward"):
            self._move_gap_to_point()
            old_start = self.gap_start
            self.gap_start = max(self.gap_start - count, 0)
            self.point_pos = self.gap_start
        return old_start - self.gap_start

    def grow_gap(self, amount: int):
        """Enlarge the gap by ``amount`` bytes.

        Raises:
            MemoryError: If the new storage would exceed ``max_capacity``
        """
        if amount < 0:
            raise ValueError(f"amount must be >= 0, got {amount}")
        if amount == 0:
            return

        old_end = len(self._storage)
        self._check_capacity(old_end + amount)
        self._storage.extend(bytes(amount))

        suffix = old_end - self.gap_end
        copy_backwards(self._storage, len(self._storage) - suffix, self.gap_end,
                       suffix, self.monitor)
        if self.point_pos >= self.gap_end and self.point_pos != self.gap_start:
            self.point_pos += amount
        self.gap_end += amount
        logger.debug(f"Grew gap by {amount} bytes (capacity {len(self._storage)})")

    def clear(self):
        """Drop all content and start over with a fresh initial gap."""
        self._storage = bytearray(self.initial_gap)
        self.gap_start = 0
        self.gap_end = self.initial_gap
        self.point_pos = 0

    def close(self):
        """Release storage. The buffer is left empty with no capacity."""
        logger.debug(f"Releasing {len(self._storage)} bytes of storage")
        self._storage = bytearray()
        self.gap_start = 0
        self.gap_end = 0
        self.point_pos = 0

    def dump(self) -> str:
        """Render internal state for debugging.

        The gap is drawn as underscores in brackets and the point as ``><``.
        The logical content follows after ``///``.
        """
        items = self._storage
        gs, ge, pp = self.gap_start, self.gap_end, self.point_pos

        def show(data) -> str:
            return bytes(data).decode("utf-8", errors="replace")

        out = [f"(len:{self.length()} cap:{len(items)})"
               f"[b:{gs} e:{ge} p:{pp} P:{self.point()}] "]

        if pp == gs and pp == ge:
            out.append(f"{show(items[:pp])}><[]{show(items[pp:])}")
        else:
            if pp <= gs:
                out.append(f"{show(items[:pp])}><{show(items[pp:gs])}")
            else:
                out.append(show(items[:gs]))
            out.append("[" + "_" * self.gap_size() + "]")
            if pp >= ge:
                out.append(f"{show(items[ge:pp])}><{show(items[pp:])}")
            else:
                out.append(show(items[ge:]))

        out.append(f"  /// {show(self.content())}")
        return "".join(out)

    def reader(self):
        """Sequential read view starting at the point."""
        return GapBufferReader(self)

    def writer(self):
        """Sequential write view inserting at the point."""
        return GapBufferWriter(self)

    def seekable_stream(self):
        """Random-access seek view over the point."""
        return GapBufferSeeker(self)

    def io(self):
        """File-like binary stream over this buffer."""
        return GapBufferIO(self)

    def _move_gap_to_point(self):
        """Relocate the gap so that it starts at the point."""
        assert self.point_pos <= self.gap_start or self.point_pos >= self.gap_end
        if self.point_pos == self.gap_start:
            return
        if self.point_pos == self.gap_end:
            self.point_pos = self.gap_start
            return

        size = self.gap_size()
        if self.point_pos < self.gap_start:
            span = self.gap_start - self.point_pos
            copy_backwards(self._storage, self.gap_end - span, self.point_pos,
                           span, self.monitor)
            self.gap_start = self.point_pos
        else:
            span = self.point_pos - self.gap_end
            copy_forwards(self._storage, self.gap_start, self.gap_end,
                          span, self.monitor)
            self.gap_start = self.point_pos - size
            self.point_pos = self.gap_start
        self.gap_end = self.gap_start + size

    def _measure(self, operation: str):
        if self.monitor is None:
            return nullcontext()
        return self.monitor.measure_operation(operation)

    def _check_capacity(self, requested: int):
        if self.max_capacity is not None and requested > self.max_capacity:
            logger.warning(
                f"Refusing to grow storage to {requested} bytes "
                f"(max_capacity {self.max_capacity})"
            )
            raise MemoryError(
                f"Storage of {requested} bytes exceeds max_capacity {self.max_capacity}"
            )
