"""Directory collaborator interfaces.

The template never speaks the directory protocol itself; it drives an
object satisfying ``DirectoryClient`` and hands search results to a
``ResultHandler``. ``QueryProcessor`` hooks run around the query and may
amend the request (for example to add paging controls).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, Tuple, TypeVar

T_co = TypeVar("T_co", covariant=True)

ALL_ATTRIBUTES = "*"


class SearchScope(str, Enum):
    BASE = "BASE"
    ONE_LEVEL = "LEVEL"
    SUBTREE = "SUBTREE"


@dataclass(frozen=True)
class SearchOptions:
    """Search configuration passed through to the collaborator untouched."""

    scope: SearchScope = SearchScope.SUBTREE
    size_limit: int = 0
    time_limit: int = 0
    attributes: Tuple[str, ...] = (ALL_ATTRIBUTES,)
    types_only: bool = False

    def __post_init__(self) -> None:
        if self.size_limit < 0 or self.time_limit < 0:
            raise ValueError("size_limit and time_limit must be >= 0")


DEFAULT_OPTIONS = SearchOptions()


@dataclass(frozen=True)
class SearchHit:
    dn: str
    attributes: Dict[str, List[Any]] = field(default_factory=dict)

    def first(self, name: str, default: Any = None) -> Any:
        vals = self.attributes.get(name)
        if not vals:
            return default
        return vals[0]


class ResultHandler(Protocol):
    def handle(self, hit: SearchHit) -> None:
        ...


class QueryProcessor(Protocol):
    def pre_process(self, context: Any, request: Dict[str, Any]) -> None:
        ...

    def post_process(self, context: Any) -> None:
        ...


class ContextAction(Protocol[T_co]):
    def __call__(self, context: Any) -> T_co:
        ...


class DirectoryClient(Protocol):
    """Acquire/operate/release triad the template times."""

    def acquire_context(self) -> Any:
        ...

    def release_context(self, context: Any) -> None:
        ...

    def search(
        self,
        context: Any,
        base: str,
        filter: str,
        options: SearchOptions,
        handler: ResultHandler,
        processor: Optional[QueryProcessor],
    ) -> None:
        ...
