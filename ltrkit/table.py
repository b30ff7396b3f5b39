#!/usr/bin/env python3
"""
LTR Table Storage
=================
In-memory layout and binary format of letter transition records.

An .ltr file is a third-order Markov chain stored as cumulative distribution
functions (CDFs). For every context of zero, one or two preceding symbols
there is one CDF holding three arrays:

- start:  distribution of the symbol at the start of a name
- middle: distribution of the symbol inside a name
- end:    distribution of the symbol ending a name

File layout:
------------
    bytes 0-7   magic "LTR V1.0"
    byte  8     alphabet size (uint8)
    then        singles, L doubles, L*L triples; each CDF is
                start[L], middle[L], end[L] as float32

Floats are written in native byte order. The format has no endianness
marker, so files only move between machines of the same byte order.
"""

import logging
import struct
from array import array
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Tuple

from ltrkit.alphabet import Alphabet, DEFAULT_ALPHABET
from ltrkit.errors import FormatError, TruncatedDataError

logger = logging.getLogger(__name__)

MAGIC = b"LTR V1.0"
HEADER = struct.Struct("=8sB")
POSITIONS = ("start", "middle", "end")
FLOAT = 'f'


def _zeros(size: int, typecode: str = FLOAT) -> array:
    return array(typecode, [0]) * size


# =============================================================================
# DATA MODEL
# =============================================================================

@dataclass
class Cdf:
    """Start/middle/end distributions for one context"""
    start: array
    middle: array
    end: array

    @classmethod
    def zeros(cls, size: int, typecode: str = FLOAT) -> 'Cdf':
        return cls(_zeros(size, typecode), _zeros(size, typecode), _zeros(size, typecode))

    @classmethod
    def from_floats(cls, floats: array, size: int) -> 'Cdf':
        """Split 3 * size floats into start, middle and end."""
        return cls(floats[:size], floats[size:2 * size], floats[2 * size:3 * size])

    def arrays(self) -> Tuple[array, array, array]:
        return (self.start, self.middle, self.end)

    def position(self, name: str) -> array:
        """Array for a position class ('start', 'middle' or 'end')."""
        if name not in POSITIONS:
            raise ValueError(f"Unknown position class {name!r}")
        return getattr(self, name)

    def to_bytes(self) -> bytes:
        for values in self.arrays():
            if values.typecode != FLOAT:
                raise ValueError(
                    f"Only float tables can be serialized, got typecode {values.typecode!r}"
                )
        return b''.join(values.tobytes() for values in self.arrays())


@dataclass
class LtrTable:
    """
    Complete Markov table: singles, doubles and triples.

    doubles[a] is conditioned on one preceding symbol a, triples[a][b] on
    the two preceding symbols a, b (a first). Use double()/triple()/context()
    to look up by symbol index; they reject indices outside the alphabet.
    """
    singles: Cdf
    doubles: List[Cdf]
    triples: List[List[Cdf]]
    alphabet: Alphabet = field(default=DEFAULT_ALPHABET, compare=False, repr=False)

    @classmethod
    def empty(cls, alphabet: Alphabet = DEFAULT_ALPHABET,
              typecode: str = FLOAT) -> 'LtrTable':
        """All-zero table; typecode 'L' gives integer count arrays."""
        size = len(alphabet)
        return cls(
            singles=Cdf.zeros(size, typecode),
            doubles=[Cdf.zeros(size, typecode) for _ in range(size)],
            triples=[[Cdf.zeros(size, typecode) for _ in range(size)]
                     for _ in range(size)],
            alphabet=alphabet,
        )

    @classmethod
    def from_cdfs(cls, cdfs: List[Cdf], alphabet: Alphabet = DEFAULT_ALPHABET) -> 'LtrTable':
        """Assemble a table from CDFs listed in file order."""
        size = len(alphabet)
        expected = 1 + size + size * size
        if len(cdfs) != expected:
            raise ValueError(f"Expected {expected} CDFs, got {len(cdfs)}")
        first = 1 + size
        return cls(
            singles=cdfs[0],
            doubles=cdfs[1:first],
            triples=[cdfs[first + i * size:first + (i + 1) * size]
                     for i in range(size)],
            alphabet=alphabet,
        )

    @property
    def num_letters(self) -> int:
        return len(self.alphabet)

    def double(self, first: int) -> Cdf:
        return self.doubles[self.alphabet.check_index(first)]

    def triple(self, first: int, second: int) -> Cdf:
        check = self.alphabet.check_index
        return self.triples[check(first)][check(second)]

    def context(self, *previous: int) -> Cdf:
        """CDF conditioned on up to two preceding symbol indices."""
        if not previous:
            return self.singles
        if len(previous) == 1:
            return self.double(previous[0])
        if len(previous) == 2:
            return self.triple(previous[0], previous[1])
        raise ValueError(f"At most two preceding symbols, got {len(previous)}")

    def cdfs(self) -> Iterator[Cdf]:
        """All CDFs in file order."""
        yield self.singles
        yield from self.doubles
        for row in self.triples:
            yield from row


def table_size(num_letters: int) -> int:
    """Bytes taken by the CDF block (without header) for num_letters."""
    cdf_count = 1 + num_letters + num_letters * num_letters
    return cdf_count * len(POSITIONS) * num_letters * array(FLOAT).itemsize


# =============================================================================
# SERIALIZATION
# =============================================================================

def load_table(data: bytes, alphabet: Alphabet = DEFAULT_ALPHABET) -> LtrTable:
    """
    Parse a complete .ltr record.

    Raises:
        FormatError: header missing, wrong magic, or alphabet size mismatch
        TruncatedDataError: not enough bytes for the probability tables
    """
    view = memoryview(data)
    if len(view) < HEADER.size:
        raise FormatError("No valid LTR header: record too short")

    magic, num_letters = HEADER.unpack_from(view)
    if magic != MAGIC:
        raise FormatError(f"No valid LTR header: magic {magic!r}, expected {MAGIC!r}")

    size = len(alphabet)
    if num_letters != size:
        raise FormatError(
            f"File built for {num_letters} letters, only {size} are supported"
        )

    expected = table_size(size)
    body = view[HEADER.size:]
    if len(body) < expected:
        raise TruncatedDataError(expected, len(body))
    if len(body) > expected:
        logger.debug(f"Ignoring {len(body) - expected} trailing bytes after tables")

    floats = array(FLOAT)
    floats.frombytes(body[:expected])

    stride = len(POSITIONS) * size
    cdfs = [Cdf.from_floats(floats[offset:offset + stride], size)
            for offset in range(0, expected // floats.itemsize, stride)]

    return LtrTable.from_cdfs(cdfs, alphabet)


def serialize_table(table: LtrTable) -> bytes:
    """Encode a table as a complete .ltr record."""
    header = HEADER.pack(MAGIC, table.num_letters)
    return header + b''.join(cdf.to_bytes() for cdf in table.cdfs())


# =============================================================================
# PERSISTENCE
# =============================================================================

def read_table(filepath, alphabet: Alphabet = DEFAULT_ALPHABET) -> LtrTable:
    """Load a table from an .ltr file"""
    return load_table(Path(filepath).read_bytes(), alphabet)


def write_table(table: LtrTable, filepath):
    """Save a table to an .ltr file"""
    Path(filepath).write_bytes(serialize_table(table))
    logger.info(f"Wrote {table.num_letters}-letter table to {filepath}")
