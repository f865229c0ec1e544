"""Stock result handlers and query processors."""
from __future__ import annotations

from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from .base import SearchHit

T = TypeVar("T")

# RFC 2696 simple paged results control
PAGED_RESULTS_OID = "1.2.840.113556.1.4.319"


class CollectingHandler:
    def __init__(self) -> None:
        self.hits: List[SearchHit] = []

    def handle(self, hit: SearchHit) -> None:
        self.hits.append(hit)


class MappingHandler(Generic[T]):
    def __init__(self, mapper: Callable[[SearchHit], T]) -> None:
        self._mapper = mapper
        self.results: List[T] = []

    def handle(self, hit: SearchHit) -> None:
        self.results.append(self._mapper(hit))


class CountingHandler:
    def __init__(self) -> None:
        self.count = 0

    def handle(self, hit: SearchHit) -> None:
        self.count += 1


class NoOpProcessor:
    def pre_process(self, context: Any, request: Dict[str, Any]) -> None:
        return None

    def post_process(self, context: Any) -> None:
        return None


class PagedResultsProcessor:
    """Requests one page per search and remembers the server's cookie.

    Reuse the same instance across calls to walk the pages::

        proc = PagedResultsProcessor(100)
        while True:
            template.execute_with_callback(base, flt, opts, handler, proc)
            if not proc.has_more:
                break
    """

    def __init__(self, page_size: int, cookie: Optional[bytes] = None) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self.page_size = page_size
        self.cookie = cookie
        self.pages = 0

    @property
    def has_more(self) -> bool:
        return bool(self.cookie)

    def pre_process(self, context: Any, request: Dict[str, Any]) -> None:
        request["paged_size"] = self.page_size
        if self.cookie:
            request["paged_cookie"] = self.cookie

    def post_process(self, context: Any) -> None:
        self.pages += 1
        result = getattr(context, "result", None) or {}
        controls = result.get("controls") or {}
        ctrl = controls.get(PAGED_RESULTS_OID) or {}
        value = ctrl.get("value") or {}
        self.cookie = value.get("cookie") or None
