#!/usr/bin/env python3
"""Exceptions raised by ltrkit."""


class LtrError(Exception):
    """Base class for all ltrkit errors."""


class FormatError(LtrError, ValueError):
    """Header is missing, carries the wrong magic, or the wrong alphabet size."""


class TruncatedDataError(LtrError):
    """Fewer bytes than the probability tables need."""

    def __init__(self, expected: int, actual: int):
        super().__init__(
            f"Unable to read the probability tables: need {expected} bytes, "
            f"got {actual}. Truncated file?"
        )
        self.expected = expected
        self.actual = actual


class SamplingError(LtrError):
    """The table cannot produce a name."""


__all__ = [
    "LtrError",
    "FormatError",
    "TruncatedDataError",
    "SamplingError",
]
