#!/usr/bin/env python3
"""
Alphabet
========
Maps name symbols to the dense indices used as array positions in LTR tables.

The order is part of the file format: letters a-z take 0-25, the apostrophe
26 and the hyphen 27. Changing it breaks every existing .ltr file.
"""

from typing import Iterable, List, Optional

LETTERS = "abcdefghijklmnopqrstuvwxyz'-"


class Alphabet:
    """Bidirectional symbol <-> index codec over a fixed symbol string."""

    def __init__(self, letters: str = LETTERS):
        if len(set(letters)) != len(letters):
            raise ValueError(f"Duplicate symbols in alphabet {letters!r}")
        self.letters = letters
        self._index = {symbol: i for i, symbol in enumerate(letters)}

    def __len__(self) -> int:
        return len(self.letters)

    def __contains__(self, symbol: str) -> bool:
        return symbol in self._index

    def __repr__(self) -> str:
        return f"Alphabet({self.letters!r})"

    def index(self, symbol: str) -> Optional[int]:
        """Position of symbol, or None if it is not part of the alphabet."""
        return self._index.get(symbol)

    def symbol(self, position: int) -> str:
        """Symbol stored at position."""
        return self.letters[self.check_index(position)]

    def check_index(self, position: int) -> int:
        """Return position unchanged, or raise IndexError if out of range."""
        if not 0 <= position < len(self.letters):
            raise IndexError(
                f"Symbol index {position} outside alphabet of {len(self.letters)}"
            )
        return position

    def encode(self, word: Iterable[str]) -> List[int]:
        """Indices of the valid symbols in word; invalid symbols are dropped."""
        return [self._index[c] for c in word if c in self._index]

    def decode(self, indices: Iterable[int]) -> str:
        return ''.join(self.symbol(i) for i in indices)


DEFAULT_ALPHABET = Alphabet()
