#!/usr/bin/env python3
"""Basic usage examples for the gap-buffer library."""

import io
import logging

from gap_buffer import GapBuffer, PerformanceMonitor


def editing_example():
    """Demonstrate point-based editing."""
    print("=== Editing Example ===")

    with GapBuffer() as buf:
        buf.insert(b"12345")
        print(buf.dump())

        buf.set_point(3)
        buf.insert(b"X")
        print(buf.dump())

        buf.delete_forward(1)
        print(buf.dump())

        buf.delete_backward(2)
        print(buf.dump())
        print(f"Content: {buf.content()!r}, point: {buf.point()}")


def stream_example():
    """Demonstrate the reader, writer and seek views."""
    print("\n=== Stream Views Example ===")

    buf = GapBuffer()
    writer = buf.writer()
    writer.print("very long text printed!")
    writer.print(" %s", "hehe lol")

    seek = buf.seekable_stream()
    seek.seek_by(-100)
    print(f"After seek_by(-100): {seek.get_pos()} of {seek.get_end_pos()}")

    seek.seek_by(20)
    print(f"After seek_by(20): {seek.get_pos()}")

    seek.seek_to(0)
    for chunk in buf.reader().iter_chunks(8):
        print(f"  chunk: {chunk!r}")


def file_like_example():
    """Demonstrate passing the buffer to code expecting a binary stream."""
    print("\n=== File-Like Example ===")

    buf = GapBuffer()
    text = io.TextIOWrapper(io.BufferedRandom(buf.io()), encoding="utf-8")
    text.write("first line\nsecond line\n")
    text.flush()

    text.seek(0)
    for line in text:
        print(f"  {line.rstrip()}")


def monitoring_example():
    """Demonstrate measuring how many bytes edits move."""
    print("\n=== Monitoring Example ===")

    monitor = PerformanceMonitor()
    buf = GapBuffer.from_bytes(b"." * 1_000_000, monitor=monitor)
    buf.set_point(500_000)
    buf.insert(b"|")
    monitor.reset()

    # typing near the point only moves the bytes in between
    for offset in (10, 20, 30):
        buf.set_point(500_001 + offset)
        buf.insert(b"*")

    print(f"Bytes moved for three nearby inserts: {monitor.bytes_copied}")
    print(f"Stats: {monitor.get_all_stats()}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    editing_example()
    stream_example()
    file_like_example()
    monitoring_example()
