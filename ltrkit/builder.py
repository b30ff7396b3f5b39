#!/usr/bin/env python3
"""
Table Builder
=============
Trains an LTR table from a list of names.

Each name contributes counts at three context depths:
- start:  first symbol, second given first, third given first two
- end:    last symbol, last given second-to-last, last given the two before
- middle: every interior triple w[p], w[p+1], w[p+2] for p in 1..n-4

Counts are then turned into cumulative distributions, one per context and
position class, in single precision so the result survives a save/load
round trip unchanged.
"""

import logging
from array import array
from typing import Iterable, Iterator, List, Optional, TextIO

from ltrkit.alphabet import Alphabet, DEFAULT_ALPHABET
from ltrkit.config import LtrConfig, default_config
from ltrkit.table import Cdf, LtrTable, FLOAT

logger = logging.getLogger(__name__)

COUNT = 'L'


def iter_words(stream: TextIO) -> Iterator[str]:
    """Yield whitespace-delimited words from a text stream."""
    for line in stream:
        yield from line.split()


def cumulate(counts: array) -> array:
    """
    Convert raw counts into a cumulative distribution.

    Each nonzero slot becomes its probability plus the cumulative value of
    the previous nonzero slot. Zero slots stay 0.0. An all-zero input gives
    an all-zero output.
    """
    result = array(FLOAT, [0]) * len(counts)
    total = sum(counts)
    if not total:
        return result

    accumulated = 0.0
    for i, count in enumerate(counts):
        if count:
            # Rounded to float32 after the division and again after the sum
            result[i] = count / total
            result[i] = result[i] + accumulated
            accumulated = result[i]
    return result


class TableBuilder:
    """Accumulates name counts and normalizes them into an LtrTable"""

    def __init__(self, config: Optional[LtrConfig] = None,
                 alphabet: Alphabet = DEFAULT_ALPHABET):
        self.config = config or default_config()
        self.alphabet = alphabet
        self.counts = LtrTable.empty(alphabet, typecode=COUNT)
        self.words_used = 0
        self.words_skipped = 0
        self.chars_dropped = 0

    def clean(self, word: str) -> List[int]:
        """
        Normalize a training word to symbol indices.

        Text from the comment marker on is discarded; remaining characters are
        lowercased and anything outside the alphabet is dropped with a warning.
        """
        marker = self.config.comment_marker
        if marker and marker in word:
            word = word[:word.index(marker)]

        indices = []
        for char in word.lower():
            index = self.alphabet.index(char)
            if index is None:
                self.chars_dropped += 1
                logger.warning(
                    f"Invalid character {char!r} (U+{ord(char):04X}) in name "
                    f"{word!r}. Skipping character."
                )
                continue
            indices.append(index)
        return indices

    def add(self, word: str) -> bool:
        """Count one training word. Returns False if it was skipped."""
        w = self.clean(word)
        if len(w) < self.config.min_word_length:
            self.words_skipped += 1
            logger.warning(
                f"Name {self.alphabet.decode(w)!r} is too short. Skipping name."
            )
            return False

        counts = self.counts

        counts.singles.start[w[0]] += 1
        counts.double(w[0]).start[w[1]] += 1
        counts.triple(w[0], w[1]).start[w[2]] += 1

        counts.singles.end[w[-1]] += 1
        counts.double(w[-2]).end[w[-1]] += 1
        counts.triple(w[-3], w[-2]).end[w[-1]] += 1

        for p in range(1, len(w) - 3):
            counts.singles.middle[w[p]] += 1
            counts.double(w[p]).middle[w[p + 1]] += 1
            counts.triple(w[p], w[p + 1]).middle[w[p + 2]] += 1

        self.words_used += 1
        return True

    def add_all(self, words: Iterable[str]) -> 'TableBuilder':
        for word in words:
            self.add(word)
        return self

    def build(self) -> LtrTable:
        """Normalize the counts gathered so far into a new table."""
        cdfs = [Cdf(*(cumulate(values) for values in cdf.arrays()))
                for cdf in self.counts.cdfs()]
        logger.info(
            f"Built table from {self.words_used} names "
            f"({self.words_skipped} skipped, {self.chars_dropped} characters dropped)"
        )
        return LtrTable.from_cdfs(cdfs, self.alphabet)


def build_table(words: Iterable[str], config: Optional[LtrConfig] = None,
                alphabet: Alphabet = DEFAULT_ALPHABET) -> LtrTable:
    """Train a table from an iterable of names."""
    return TableBuilder(config, alphabet).add_all(words).build()
