"""Directory collaborators and search callbacks."""

from .base import (
    ALL_ATTRIBUTES,
    DEFAULT_OPTIONS,
    ContextAction,
    DirectoryClient,
    QueryProcessor,
    ResultHandler,
    SearchHit,
    SearchOptions,
    SearchScope,
)
from .handlers import (
    CollectingHandler,
    CountingHandler,
    MappingHandler,
    NoOpProcessor,
    PagedResultsProcessor,
)

__all__ = [
    "ALL_ATTRIBUTES",
    "DEFAULT_OPTIONS",
    "CollectingHandler",
    "ContextAction",
    "CountingHandler",
    "DirectoryClient",
    "MappingHandler",
    "NoOpProcessor",
    "PagedResultsProcessor",
    "QueryProcessor",
    "ResultHandler",
    "SearchHit",
    "SearchOptions",
    "SearchScope",
]
