"""Operation timing and byte-copy accounting for gap buffers."""
import logging
import time
from contextlib import contextmanager

logger = logging.getLogger(__name__)


class PerformanceMonitor:
    """Monitor buffer operation cost.

    Each named operation accumulates how often it ran, how long it took and
    how many bytes were physically moved while it ran. The byte count is what
    makes gap relocation cost observable independent of timer noise.
    """

    def __init__(self):
        self.metrics = {}
        self.bytes_copied = 0
        self.copy_calls = 0

    @contextmanager
    def measure_operation(self, operation_name: str):
        """Context manager measuring duration and bytes moved.

        Args:
            operation_name: Name of operation being measured
        """
        copied_before = self.bytes_copied
        start_time = time.perf_counter()
        try:
            yield
        finally:
            duration = time.perf_counter() - start_time
            self._record_metric(operation_name, duration,
                                self.bytes_copied - copied_before)

    def record_copy(self, count: int):
        """Record a physical move of ``count`` bytes."""
        self.bytes_copied += count
        self.copy_calls += 1

    def reset(self):
        """Forget all recorded timings and copy counts."""
        self.metrics = {}
        self.bytes_copied = 0
        self.copy_calls = 0

    def _record_metric(self, operation: str, duration: float, copied: int):
        entry = self.metrics.setdefault(
            operation,
            {"count": 0, "times": [], "bytes_copied": 0, "max_bytes_copied": 0},
        )
        entry["count"] += 1
        entry["times"].append(duration)
        entry["bytes_copied"] += copied
        entry["max_bytes_copied"] = max(entry["max_bytes_copied"], copied)
        logger.debug(f"{operation}: {duration * 1000:.3f} ms, {copied} bytes moved")

    def get_stats(self, operation: str) -> dict:
        """Get statistics for an operation.

        Args:
            operation: Operation name

        Returns:
            Dictionary with count, timings and bytes moved, or ``{}`` if the
            operation was never measured
        """
        entry = self.metrics.get(operation)
        if entry is None:
            return {}

        times = entry["times"]
        total = sum(times)
        return {
            "count": entry["count"],
            "total_time": total,
            "average_time": total / entry["count"],
            "min_time": min(times),
            "max_time": max(times),
            "bytes_copied": entry["bytes_copied"],
            "max_bytes_copied": entry["max_bytes_copied"],
        }

    def get_all_stats(self) -> dict:
        """Get per-operation statistics, plus copy totals under ``"copies"``."""
        stats = {op: self.get_stats(op) for op in self.metrics}
        stats["copies"] = {"bytes": self.bytes_copied, "calls": self.copy_calls}
        return stats
