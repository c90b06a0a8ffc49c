"""
GenerationStats - Statistics for one thumbnail job.
"""

import time
from dataclasses import dataclass, field
from typing import List

from .job import ThumbnailResult


@dataclass
class GenerationStats:
    """
    Statistics for one job.

    Attributes:
        total_to_process: Number of options in the job
        processed: Thumbnails written
        errors: Options that failed
        bytes_generated: Total encoded bytes written
        start_time: Start timestamp
        error_details: List of error messages
    """
    total_to_process: int = 0
    processed: int = 0
    errors: int = 0
    bytes_generated: int = 0
    start_time: float = field(default_factory=time.time)
    error_details: List[str] = field(default_factory=list)

    def record(self, result: ThumbnailResult) -> None:
        """Account for one option result."""
        if result.ok:
            self.processed += 1
            self.bytes_generated += result.bytes_written
        else:
            self.errors += 1
            self.error_details.append(f"opts[{result.index}]: {result.error}")

    @property
    def elapsed_seconds(self) -> float:
        """Elapsed time in seconds."""
        return time.time() - self.start_time

    @property
    def rate_per_second(self) -> float:
        """Thumbnails written per second."""
        if self.elapsed_seconds > 0:
            return self.processed / self.elapsed_seconds
        return 0.0

    @property
    def completed_count(self) -> int:
        """Total completed (processed + errors)."""
        return self.processed + self.errors

    @property
    def remaining_count(self) -> int:
        """Options not reported yet."""
        return self.total_to_process - self.completed_count
