"""
Spark data source integration.
"""

from .osdu_source import OsduDataSource, OsduDataSourceWriter

__all__ = [
    "OsduDataSource",
    "OsduDataSourceWriter",
]
