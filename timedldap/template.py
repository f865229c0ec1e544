"""Timed directory template.

Wraps a ``DirectoryClient`` and times the three phases of every call:
acquiring a context, running the operation against it, and releasing it.
Timings land in the caller's scope-local snapshot of a ``MetricsRegistry``
and are read back with ``get_metrics``.

Example::

    template = TimedDirectoryTemplate(Ldap3DirectoryClient.from_settings())
    names = template.search_for_list("ou=users", "(uid=john.doe)", None,
                                     lambda hit: hit.first("cn"))
    template.get_metrics()   # {"acquire": 3, "search": 1, "release": 0}
"""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, TypeVar

from .client.base import (
    DEFAULT_OPTIONS,
    ContextAction,
    DirectoryClient,
    QueryProcessor,
    ResultHandler,
    SearchHit,
    SearchOptions,
)
from .client.handlers import CountingHandler, MappingHandler
from .config import load_settings
from .core.errors import AcquisitionError, OperationError, ReleaseError
from .telemetry.logging import get_logger
from .telemetry.metrics import DEFAULT_REGISTRY, MetricsRegistry, Phase, Timer

T = TypeVar("T")

LOG = get_logger(__name__)


class TimedDirectoryTemplate:
    """Acquire/operate/release with per-phase timing.

    The client is held by reference only; the template never closes it.
    ``operate_phase`` names the metric written by ``execute_with_result``;
    searches always record under ``search``.
    """

    def __init__(
        self,
        client: DirectoryClient,
        *,
        registry: Optional[MetricsRegistry] = None,
        operate_phase: Phase | str | None = None,
    ) -> None:
        self.client = client
        self.registry = registry if registry is not None else DEFAULT_REGISTRY
        if operate_phase is None:
            operate_phase = load_settings().operate_phase
        self.operate_phase = Phase(operate_phase)
        if self.operate_phase not in (Phase.OPERATE, Phase.SEARCH):
            raise ValueError(f"operate_phase must be 'operate' or 'search', got {operate_phase!r}")

    # -- lifecycle ---------------------------------------------------------

    def _run(self, operate: Callable[[Any], T], phase: Phase) -> T:
        with Timer(Phase.ACQUIRE.value) as t_acq:
            try:
                context = self.client.acquire_context()
            except Exception as e:
                LOG.error("Failed to acquire context: %s", e)
                raise AcquisitionError.wrap(e) from e
        self.registry.record(Phase.ACQUIRE, t_acq.elapsed_ms)

        try:
            t_op = Timer(phase.value)
            try:
                with t_op:
                    return operate(context)
            except Exception as e:
                LOG.error("Execution of LDAP callback failed: %s", e)
                raise OperationError.wrap(e, phase=phase.value) from e
            finally:
                self.registry.record(phase, t_op.elapsed_ms)
        finally:
            self._release(context)

    def _release(self, context: Any) -> None:
        t_rel = Timer(Phase.RELEASE.value)
        try:
            with t_rel:
                self.client.release_context(context)
        except Exception as e:
            err = ReleaseError.wrap(e)
            LOG.error("Failed to close context: %s", err, exc_info=err)
        finally:
            self.registry.record(Phase.RELEASE, t_rel.elapsed_ms)
        LOG.info("Released context in %d ms", t_rel.elapsed_ms)

    # -- operations --------------------------------------------------------

    def execute_with_result(self, action: ContextAction[T]) -> T:
        """Run ``action`` against a freshly acquired context and return its result."""
        return self._run(action, self.operate_phase)

    # Spring-style name kept for callers porting read-only executors
    execute_read_only = execute_with_result

    def execute_with_callback(
        self,
        base: str,
        filter: str,
        options: Optional[SearchOptions],
        handler: ResultHandler,
        processor: Optional[QueryProcessor] = None,
    ) -> None:
        """Stream search results for ``filter`` under ``base`` into ``handler``."""
        if not isinstance(base, str):
            raise TypeError(f"base must be a string, got {type(base).__name__}")
        opts = options if options is not None else DEFAULT_OPTIONS

        def _search(context: Any) -> None:
            self.client.search(context, base, filter, opts, handler, processor)

        self._run(_search, Phase.SEARCH)

    search = execute_with_callback

    def search_for_list(
        self,
        base: str,
        filter: str,
        options: Optional[SearchOptions],
        mapper: Callable[[SearchHit], T],
        processor: Optional[QueryProcessor] = None,
    ) -> List[T]:
        handler: MappingHandler[T] = MappingHandler(mapper)
        self.execute_with_callback(base, filter, options, handler, processor)
        return handler.results

    def count(self, base: str, filter: str, options: Optional[SearchOptions] = None) -> int:
        handler = CountingHandler()
        self.execute_with_callback(base, filter, options, handler)
        return handler.count

    # -- metrics -----------------------------------------------------------

    def get_metrics(self) -> Dict[str, int]:
        return self.registry.snapshot()

    def reset_metrics(self) -> None:
        self.registry.reset()
