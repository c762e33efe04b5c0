"""
Memory Book - a "guess who wrote it" party game over shared memories.

This package provides a Streamlit application that reads memories from a
spreadsheet-backed endpoint and lets players guess each memory's author.
"""

__version__ = "1.0.0"
