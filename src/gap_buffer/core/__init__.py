"""Core gap buffer modules."""

from .buffer import GROWTH_DIVISOR, INIT_GAP_SIZE, GapBuffer, copy_backwards, copy_forwards
from .monitor import PerformanceMonitor
from .streams import GapBufferIO, GapBufferReader, GapBufferSeeker, GapBufferWriter

__all__ = [
    # Buffer
    'GapBuffer',
    'INIT_GAP_SIZE',
    'GROWTH_DIVISOR',
    'copy_forwards',
    'copy_backwards',

    # Stream views
    'GapBufferReader',
    'GapBufferWriter',
    'GapBufferSeeker',
    'GapBufferIO',

    # Monitoring
    'PerformanceMonitor',
]
