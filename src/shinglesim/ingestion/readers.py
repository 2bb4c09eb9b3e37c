# src/shinglesim/ingestion/readers.py
import io
import os
from typing import IO

from ..similarity_search.errors import DocumentNotFoundError, DocumentOpenError


def open_document(path) -> IO[str]:
    """
    Open a plain text document for tokenizing. Undecodable bytes are replaced
    rather than failing the whole comparison.
    """
    if not os.path.isfile(path):
        raise DocumentNotFoundError(f"Couldn't open `{path}`: no such file")
    try:
        return open(path, "r", encoding="utf-8", errors="replace")
    except OSError as e:
        raise DocumentOpenError(f"Couldn't open `{path}`: {e}") from e


def text_stream(text: str) -> IO[str]:
    return io.StringIO(text)
