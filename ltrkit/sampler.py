#!/usr/bin/env python3
"""
Name Sampler
============
Generates names from an LTR table the way the game's GetRandomName() does.

Each name runs through a small state machine:

    NEED_FIRST -> NEED_SECOND -> NEED_THIRD -> EXTENDING -> DONE
         ^______________________ RESTART ________________|

The first three symbols come from the start distributions of the singles,
doubles and triples tables. After that every step draws one probability,
then rolls randrange(12); if the roll is at most the current length the end
distribution is tried first, otherwise (or if that misses) the middle one.
A step where both miss drops the last symbol. Too many drops, or dropping
below the minimum length, starts the whole name over.

The draw order is fixed, so the same seed always gives the same names.
"""

import logging
import random
import time
from enum import Enum
from typing import Iterator, List, Optional, Sequence

from ltrkit.config import LtrConfig, default_config
from ltrkit.errors import SamplingError
from ltrkit.table import LtrTable

logger = logging.getLogger(__name__)


class SampleState(Enum):
    NEED_FIRST = "need_first"
    NEED_SECOND = "need_second"
    NEED_THIRD = "need_third"
    EXTENDING = "extending"
    DONE = "done"
    RESTART = "restart"


# Start states and the state that follows each one
_START_STATES = {
    SampleState.NEED_FIRST: SampleState.NEED_SECOND,
    SampleState.NEED_SECOND: SampleState.NEED_THIRD,
    SampleState.NEED_THIRD: SampleState.EXTENDING,
}


def make_rng(seed: Optional[int] = None) -> random.Random:
    """Random stream seeded with seed, or the current time if None."""
    if seed is None:
        seed = int(time.time())
    logger.debug(f"Seeding RNG with {seed}")
    return random.Random(seed)


def select(cdf: Sequence[float], prob: float) -> Optional[int]:
    """First index whose cumulative value exceeds prob, or None."""
    for i, value in enumerate(cdf):
        if prob < value:
            return i
    return None


class NameSampler:
    """Draws names from one table with a single random stream"""

    def __init__(self,
                 table: LtrTable,
                 rng: Optional[random.Random] = None,
                 config: Optional[LtrConfig] = None):
        """
        Args:
            table: Table to sample from (read only)
            rng: Random source providing random() and randrange()
            config: Length, backoff and restart limits
        """
        if not any(table.singles.start):
            raise SamplingError("Table has no start probabilities, cannot generate names")
        self.table = table
        self.rng = rng if rng is not None else make_rng()
        self.config = config or default_config()

    def _attempt(self) -> Optional[List[int]]:
        """Run the state machine once. Returns symbol indices, or None to restart."""
        word: List[int] = []
        backoffs = 0
        state = SampleState.NEED_FIRST

        while True:
            if state in _START_STATES:
                cdf = self.table.context(*word)
                index = select(cdf.start, self.rng.random())
                if index is None:
                    # Sparse training data: the CDF never reaches the draw
                    state = SampleState.RESTART
                    continue
                word.append(index)
                state = _START_STATES[state]

            elif state is SampleState.EXTENDING:
                cdf = self.table.triple(word[-2], word[-1])
                prob = self.rng.random()

                if self.rng.randrange(self.config.end_roll) <= len(word):
                    index = select(cdf.end, prob)
                    if index is not None:
                        word.append(index)
                        state = SampleState.DONE
                        continue

                index = select(cdf.middle, prob)
                if index is not None:
                    word.append(index)
                    continue

                # Dead end: back off one symbol
                word.pop()
                if len(word) < self.config.min_name_length:
                    state = SampleState.RESTART
                    continue
                backoffs += 1
                if backoffs > self.config.max_backoffs:
                    state = SampleState.RESTART

            elif state is SampleState.DONE:
                return word

            else:
                return None

    def sample(self) -> str:
        """Generate one name, capitalized."""
        restarts = 0
        while True:
            word = self._attempt()
            if word is not None:
                name = self.table.alphabet.decode(word)
                return name[0].upper() + name[1:]

            restarts += 1
            max_restarts = self.config.max_restarts
            if max_restarts is not None and restarts > max_restarts:
                raise SamplingError(f"No name found after {max_restarts} restarts")

    def generate(self, count: int) -> Iterator[str]:
        """Yield count names from the same random stream."""
        for _ in range(count):
            yield self.sample()


def sample_word(table: LtrTable,
                rng: Optional[random.Random] = None,
                config: Optional[LtrConfig] = None) -> str:
    """Generate a single name from table."""
    return NameSampler(table, rng, config).sample()
