# src/shinglesim/similarity_search/shingler.py
"""
Word shingles: a step-1 sliding window of `length` consecutive tokens,
concatenated without separator ("the", "quick" -> "thequick").
"""

from typing import Iterable, Iterator, List, Optional

from .errors import require_positive


class ShingleRing:
    """
    Fixed-capacity ring of the most recent tokens.

    push() stores a token over the oldest slot and, once the ring has been
    filled, returns the shingle formed by all slots in chronological order.
    """

    def __init__(self, length: int):
        self.length = require_positive("shingle_length", length)
        self._slots: List[str] = [""] * self.length
        self._head = 0      # next slot to overwrite == oldest token once full
        self.count = 0      # tokens pushed since the last clear()

    def push(self, token: str) -> Optional[str]:
        self._slots[self._head] = token
        self._head = (self._head + 1) % self.length
        self.count += 1
        if self.count < self.length:
            return None
        return "".join(self._slots[self._head:] + self._slots[:self._head])

    def clear(self):
        self._slots = [""] * self.length
        self._head = 0
        self.count = 0


def iter_shingles(tokens: Iterable[str], length: int) -> Iterator[str]:
    ring = ShingleRing(length)
    for token in tokens:
        shingle = ring.push(token)
        if shingle is not None:
            yield shingle


def shingle_count(token_count: int, length: int) -> int:
    return max(0, token_count - length + 1)
