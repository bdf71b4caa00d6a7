"""
Progress and warning reporting for import runs.

ProgressMonitor is the importer's only reporting channel. Warnings are
logged as they happen and counted per distinct message, so that an import
over tens of thousands of rows can end with a compact summary instead of
relying on the scroll-back.

Examples:
    >>> from genomatrix.progress import ProgressMonitor
    >>> monitor = ProgressMonitor(progress_interval=500)
    >>> monitor.log_warning("Gene not found: [FOO]")
    >>> monitor.n_warnings
    1
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import List, Optional, Tuple

__all__ = ['ProgressMonitor']


class ProgressMonitor:
    """
    Logs warnings and informational messages and counts processed lines.

    Args:
        logger: Logger to report through (default: this module's logger)
        progress_interval: Log a progress line every N processed lines
        max_distinct_warnings: Distinct messages kept for the summary; later
            new messages are still logged and counted, but not kept
    """

    def __init__(self, logger: Optional[logging.Logger] = None, progress_interval: int = 1000,
                 max_distinct_warnings: int = 1000):
        if progress_interval <= 0:
            raise ValueError(f"progress_interval must be positive, got {progress_interval}")
        if max_distinct_warnings <= 0:
            raise ValueError(
                f"max_distinct_warnings must be positive, got {max_distinct_warnings}"
            )
        self.logger = logger or logging.getLogger(__name__)
        self.progress_interval = progress_interval
        self.current_value = 0
        self.max_value: Optional[int] = None
        self._warnings: Counter = Counter()
        self.max_distinct_warnings = max_distinct_warnings
        self.n_untracked_warnings = 0

    def set_max_value(self, max_value: int) -> None:
        self.max_value = max_value

    def set_current_message(self, message: str) -> None:
        self.logger.info(message)

    def log_warning(self, message: str) -> None:
        if message in self._warnings or len(self._warnings) < self.max_distinct_warnings:
            self._warnings[message] += 1
        else:
            self.n_untracked_warnings += 1
        self.logger.warning(message)

    def increment(self) -> None:
        self.current_value += 1
        if self.current_value % self.progress_interval == 0:
            if self.max_value:
                pct = 100 * self.current_value / self.max_value
                self.logger.info(
                    f"Processed {self.current_value:,}/{self.max_value:,} lines ({pct:.1f}%)"
                )
            else:
                self.logger.info(f"Processed {self.current_value:,} lines")

    @property
    def n_warnings(self) -> int:
        return sum(self._warnings.values()) + self.n_untracked_warnings

    def warnings(self) -> List[Tuple[str, int]]:
        """Distinct warning messages with their counts, most frequent first."""
        return self._warnings.most_common()

    def log_summary(self, limit: int = 20) -> None:
        if not self._warnings:
            self.logger.info("No warnings")
            return
        self.logger.info(
            f"{self.n_warnings} warnings ({len(self._warnings)} distinct), "
            f"showing up to {limit}:"
        )
        for message, count in self._warnings.most_common(limit):
            self.logger.info(f"  [{count}x] {message}")
        if self.n_untracked_warnings:
            self.logger.info(
                f"  {self.n_untracked_warnings} further warnings not itemized "
                f"(more than {self.max_distinct_warnings} distinct messages)"
            )
