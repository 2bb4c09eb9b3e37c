# src/shinglesim/ingestion/__init__.py
from .database import DocumentDatabase
from .readers import open_document, text_stream

__all__ = ["DocumentDatabase", "open_document", "text_stream"]
