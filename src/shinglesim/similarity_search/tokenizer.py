# src/shinglesim/similarity_search/tokenizer.py
"""
Lazy word tokenizer over text or byte streams.

A token is a maximal run of letters/digits; an apostrophe may appear inside a
token once it has started ("it's" stays whole, "'tis" becomes "tis").
Everything else (whitespace, punctuation, underscores) is a delimiter.
"""

import codecs
import io
import re
from typing import Iterator, List, Optional

DEFAULT_CHUNK_SIZE = 64 * 1024

# [^\W_] is "alphanumeric" in the str.isalnum() sense
_TOKEN_RE = re.compile(r"[^\W_](?:[^\W_]|')*")


class Tokenizer:
    """
    Pulls tokens one at a time from a readable stream.

    next_token() returns None at end of stream. reset() seeks the stream back
    to its start so the same document can be tokenized again.
    """

    def __init__(self, stream, chunk_size: int = DEFAULT_CHUNK_SIZE):
        if chunk_size < 1:
            raise ValueError("chunk_size must be >= 1")
        self.stream = stream
        self.chunk_size = chunk_size
        self._clear_state()

    @classmethod
    def from_text(cls, text: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> "Tokenizer":
        return cls(io.StringIO(text), chunk_size=chunk_size)

    def _clear_state(self):
        self._buffer = ""
        self._pos = 0
        self._eof = False
        self._decoder = None

    def reset(self):
        self.stream.seek(0)
        self._clear_state()

    def _read_chunk(self) -> str:
        # Byte streams are decoded incrementally; a chunk ending in the middle
        # of a multi-byte sequence can decode to "" without being the end.
        while True:
            raw = self.stream.read(self.chunk_size)
            if not isinstance(raw, bytes):
                return raw
            if self._decoder is None:
                self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
            text = self._decoder.decode(raw, final=not raw)
            if text or not raw:
                return text

    def _fill(self, keep: str = "") -> bool:
        """Replace the buffer with `keep` + the next chunk. False at end of stream."""
        if self._eof:
            return False
        chunk = self._read_chunk()
        if not chunk:
            self._eof = True
            return False
        self._buffer = keep + chunk
        self._pos = 0
        return True

    def next_token(self) -> Optional[str]:
        while True:
            match = _TOKEN_RE.search(self._buffer, self._pos)
            if match is None:
                if not self._fill():
                    return None
                continue
            if match.end() == len(self._buffer) and not self._eof:
                # the token may continue in the next chunk
                if self._fill(keep=match.group()):
                    continue
            self._pos = match.end()
            return match.group()

    def __iter__(self) -> Iterator[str]:
        while True:
            token = self.next_token()
            if token is None:
                return
            yield token


def tokenize(text: str) -> List[str]:
    return list(Tokenizer.from_text(text))
