"""
osdu-ingest: batched writer that loads Spark rows into OSDU storage.
"""

__version__ = "0.1.0"
