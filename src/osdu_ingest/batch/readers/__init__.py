"""
Input readers for the ingest CLI.
"""

from .file_reader import FileReader

__all__ = [
    "FileReader",
]
