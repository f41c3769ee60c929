"""Gap buffer: byte-oriented text storage for cheap edits near a moving point."""

from .core import (
    GapBuffer,
    GapBufferIO,
    GapBufferReader,
    GapBufferSeeker,
    GapBufferWriter,
    PerformanceMonitor,
)

__version__ = "0.1.0"

__all__ = [
    # Core buffer
    "GapBuffer",
    # Stream views
    "GapBufferReader",
    "GapBufferWriter",
    "GapBufferSeeker",
    "GapBufferIO",
    # Monitoring
    "PerformanceMonitor",
]
