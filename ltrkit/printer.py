#!/usr/bin/env python3
"""Human readable listing of an LTR table."""

from array import array
from typing import Iterator

from ltrkit.table import FLOAT, Cdf, LtrTable

HEADER_LINE = "Sequence | CDF(start)  P(start) | CDF(middle)  P(middle) | CDF(end)  P(end)"


def _step(value: float, previous: float) -> float:
    """Difference of two stored values, rounded to float32 like the stored CDFs."""
    return array(FLOAT, [value - previous])[0]


def _rows(prefix: str, cdf: Cdf, letters: str) -> Iterator[str]:
    """One row per symbol; P is the step from the previous nonzero CDF value."""
    last = [0.0, 0.0, 0.0]
    for i, symbol in enumerate(letters):
        cells = []
        for k, values in enumerate(cdf.arrays()):
            value = values[i]
            cells.append((value, 0.0 if value == 0.0 else _step(value, last[k])))
            if value > 0.0:
                last[k] = value
        (s, ps), (m, pm), (e, pe) = cells
        sequence = f"{prefix}{symbol}".ljust(8)
        yield (f"{sequence} |{s: .5f}    {ps: .5f}  |{m: .5f}     {pm: .5f}   "
               f"|{e: .5f}  {pe: .5f}")


def format_table(table: LtrTable) -> Iterator[str]:
    """Yield the lines of the listing for table."""
    letters = table.alphabet.letters
    yield f"Num letters: {table.num_letters}"
    yield HEADER_LINE

    yield from _rows("", table.singles, letters)
    for i, first in enumerate(letters):
        yield from _rows(first, table.double(i), letters)
    for i, first in enumerate(letters):
        for j, second in enumerate(letters):
            yield from _rows(first + second, table.triple(i, j), letters)
