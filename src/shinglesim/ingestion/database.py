# src/shinglesim/ingestion/database.py
"""
The document database: a directory of text files plus a listing file
(one document name per line) naming which of them take part.
"""

import logging
from functools import partial
from pathlib import Path
from typing import Callable, Dict, IO, List, Optional

from ..similarity_search import configs
from ..similarity_search.errors import DocumentNotFoundError, DocumentOpenError
from .readers import open_document

logger = logging.getLogger(__name__)


class DocumentDatabase:
    def __init__(self, root=None, listing: Optional[str] = None):
        self.root = Path(root if root is not None else configs.DB_DIR)
        listing = listing if listing is not None else configs.DB_LISTING
        listing_path = Path(listing)
        # a bare file name is looked up inside the database directory
        if not listing_path.is_absolute() and not listing_path.exists():
            listing_path = self.root / listing_path
        self.listing_path = listing_path

    def names(self) -> List[str]:
        try:
            text = self.listing_path.read_text(encoding="utf-8")
        except OSError as e:
            raise DocumentOpenError(
                f"Couldn't read the database listing `{self.listing_path}`: {e}"
            ) from e
        names = []
        for line in text.splitlines():
            name = line.strip()
            if name and name not in names:
                names.append(name)
        logger.debug("database %s lists %d documents", self.root, len(names))
        return names

    def _real_path(self, name: str) -> Optional[Path]:
        try:
            return self.resolve(name).resolve()
        except DocumentNotFoundError:
            return None

    def same_document(self, first: str, second: str) -> bool:
        """True when both names point at the same file (e.g. `essay.txt` and `db/essay.txt`)."""
        if first == second:
            return True
        path = self._real_path(first)
        return path is not None and path == self._real_path(second)

    def others(self, name: str) -> List[str]:
        """Listed documents other than `name`, however `name` was spelled."""
        target = self._real_path(name)
        result = []
        for listed in self.names():
            if listed == name:
                continue
            if target is not None and self._real_path(listed) == target:
                continue
            result.append(listed)
        return result

    def path_for(self, name: str) -> Path:
        return self.root / name

    def resolve(self, name: str) -> Path:
        """
        Path of `name` inside the database directory, or `name` itself when it
        points at an existing file elsewhere.
        """
        candidate = self.path_for(name)
        if candidate.is_file():
            return candidate
        literal = Path(name)
        if literal.is_file():
            return literal
        raise DocumentNotFoundError(
            f"Couldn't open `{candidate}`, please enter a file that's listed in the database."
        )

    def open(self, name: str) -> IO[str]:
        return open_document(self.resolve(name))

    def opener(self, name: str) -> Callable[[], IO[str]]:
        """Zero-argument callable opening `name`, resolved lazily on each call."""
        return partial(self.open, name)

    def openers(self, names: List[str]) -> Dict[str, Callable[[], IO[str]]]:
        return {name: self.opener(name) for name in names}
