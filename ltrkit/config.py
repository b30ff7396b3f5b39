#!/usr/bin/env python3
"""
Configuration
=============
Runtime knobs for building, repairing and sampling LTR tables.

Values left unset are filled from ``configs/app.yaml``. A config object is
passed explicitly into every entry point; nothing here is process-wide.
"""

from dataclasses import dataclass
from typing import Optional

from ltrkit.settings import get_setting


@dataclass
class LtrConfig:
    """Settings shared by the builder, repairer and sampler."""
    # Table checks
    cdf_tolerance: Optional[float] = None      # Leeway around 1.0 for a finished CDF

    # Training
    comment_marker: Optional[str] = None       # Truncate training words here
    min_word_length: Optional[int] = None      # Shorter cleaned words are skipped

    # Sampling
    min_name_length: Optional[int] = None      # Backoff below this restarts the name
    max_backoffs: Optional[int] = None         # Dead ends allowed per name
    end_roll: Optional[int] = None             # Termination if randrange(end_roll) <= length
    max_restarts: Optional[int] = None         # None means restart forever

    # CLI
    default_count: Optional[int] = None

    def __post_init__(self):
        table = get_setting("table", {}) or {}
        builder = get_setting("builder", {}) or {}
        sampler = get_setting("sampler", {}) or {}
        cli = get_setting("cli", {}) or {}

        if self.cdf_tolerance is None:
            self.cdf_tolerance = table.get("cdf_tolerance")
        if self.comment_marker is None:
            self.comment_marker = builder.get("comment_marker")
        if self.min_word_length is None:
            self.min_word_length = builder.get("min_word_length")
        if self.min_name_length is None:
            self.min_name_length = sampler.get("min_name_length")
        if self.max_backoffs is None:
            self.max_backoffs = sampler.get("max_backoffs")
        if self.end_roll is None:
            self.end_roll = sampler.get("end_roll")
        if self.max_restarts is None:
            self.max_restarts = sampler.get("max_restarts")
        if self.default_count is None:
            self.default_count = cli.get("default_count")

        required = {
            "table.cdf_tolerance": self.cdf_tolerance,
            "builder.comment_marker": self.comment_marker,
            "builder.min_word_length": self.min_word_length,
            "sampler.min_name_length": self.min_name_length,
            "sampler.max_backoffs": self.max_backoffs,
            "sampler.end_roll": self.end_roll,
            "cli.default_count": self.default_count,
        }
        for key, value in required.items():
            if value is None:
                raise ValueError(f"{key} must be set in app.yaml")

        if self.end_roll < 1:
            raise ValueError(f"end_roll must be positive, got {self.end_roll}")

    def within_tolerance(self, value: float) -> bool:
        """True if value is 1.0 give or take cdf_tolerance."""
        return 1.0 - self.cdf_tolerance <= value <= 1.0 + self.cdf_tolerance


_default = None

def default_config() -> LtrConfig:
    """Get a shared config built purely from app.yaml."""
    global _default
    if _default is None:
        _default = LtrConfig()
    return _default
