"""Path queries over decoded JSON-like data."""

from .engine import (
    DataFetcher,
    PathNotFoundError,
    PathQueryEngine,
    QueryError,
    SourceNotFoundError,
    VariableNotFoundError,
    apply_filter,
)

__all__ = [
    "DataFetcher",
    "PathNotFoundError",
    "PathQueryEngine",
    "QueryError",
    "SourceNotFoundError",
    "VariableNotFoundError",
    "apply_filter",
]
