"""Exceptions raised by the lease economics core."""

from __future__ import annotations

from typing import List


class BlockingNormalizationError(ValueError):
    """Raised by assert_no_blocking_issues when normalization found severity=error issues."""

    def __init__(self, details: List[str]):
        self.details = details
        super().__init__(f"Blocking normalization issues: {'; '.join(details)}")
