# src/shinglesim/__init__.py
"""
Document similarity estimation with word shingles and MinHash.
"""

__version__ = "0.1.0"
