# tests/conftest.py
import sys
import os

# Ensure src is in the path so the tests run without installing the package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))
