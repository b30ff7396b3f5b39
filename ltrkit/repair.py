#!/usr/bin/env python3
"""
Table Repair
============
Fixes the known corruption in tables written by the BioWare toolset.

That tool stopped carrying the cumulative sum forward past any zero entry
in singles.middle and singles.end. Every run of nonzero entries after a gap
restarts from its own partial sum, so the array never reaches 1.0.

Detection is intentionally narrow: an array is corrupt only if none of its
entries is within tolerance of 1.0. Anything else is left alone.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Set

from ltrkit.config import LtrConfig, default_config
from ltrkit.table import LtrTable

logger = logging.getLogger(__name__)

# Only the singles arrays were affected by the toolset bug
REPAIRABLE = ("middle", "end")


@dataclass
class RepairReport:
    """What a repair pass did"""
    corrected: Dict[str, float] = field(default_factory=dict)   # array -> final accumulator
    off_target: Set[str] = field(default_factory=set)            # still not ~1.0 afterwards

    @property
    def changed(self) -> bool:
        return bool(self.corrected)


def detect_corruption(table: LtrTable, config: Optional[LtrConfig] = None) -> Set[str]:
    """Names of singles arrays that never reach ~1.0."""
    config = config or default_config()
    corrupt = set()
    for name in REPAIRABLE:
        values = table.singles.position(name)
        if not any(config.within_tolerance(v) for v in values):
            corrupt.add(name)
    return corrupt


def _repair_array(values, letters: str) -> float:
    """Rebuild cumulative values in place and return the final accumulator."""
    accumulator = 0.0
    correction = 0.0
    previous = 0.0
    for i in range(len(values)):
        raw = values[i]
        if raw != 0.0:
            if i > 0 and previous == 0.0:
                correction = accumulator
            values[i] = raw + correction
            accumulator = values[i]
        symbol = letters[i]
        logger.debug(
            f"ltr: {symbol}, original: {raw:f}, corrected: {values[i]:f}, "
            f"acc: {accumulator:f}, offset: {correction:f}"
        )
        previous = raw
    return accumulator


def repair_table(table: LtrTable, config: Optional[LtrConfig] = None,
                 report: Optional[RepairReport] = None) -> LtrTable:
    """
    Correct corrupted singles.middle / singles.end arrays in place.

    A table that already reaches 1.0 in both arrays is returned untouched.
    If a corrected array still misses 1.0, a warning is logged and the
    table is returned anyway.

    Args:
        table: Table to fix (mutated)
        config: Tolerance settings
        report: Optional RepairReport filled with what was changed

    Returns:
        The same table
    """
    config = config or default_config()
    report = report if report is not None else RepairReport()

    for name in sorted(detect_corruption(table, config), key=REPAIRABLE.index):
        logger.info(f"Correcting errors in singles.{name} probability table...")
        values = table.singles.position(name)
        accumulator = _repair_array(values, table.alphabet.letters)
        report.corrected[name] = accumulator
        if not config.within_tolerance(accumulator):
            report.off_target.add(name)
            logger.warning(
                f"During fixing of singles.{name}, accumulator ended up at "
                f"an incorrect value of {accumulator:f}"
            )

    if report.changed:
        logger.info("Corrections completed.")
    return table
