"""Phase timers and scope-local metric snapshots.

A snapshot maps a phase name to its last elapsed time in whole
milliseconds. Each isolation scope (an explicitly injected key, else the
running asyncio task, else the current thread) owns exactly one snapshot.
Snapshots of live units are never cleared automatically: callers that
reuse threads (pools) must call ``reset`` between logical operations.
A finished task or thread takes its snapshot with it.
"""
from __future__ import annotations

import asyncio
import contextvars
import threading
import time
import weakref
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Hashable, Iterator, Optional

_clock = time.perf_counter


class Phase(str, Enum):
    ACQUIRE = "acquire"
    OPERATE = "operate"
    SEARCH = "search"
    RELEASE = "release"

    def __str__(self) -> str:
        return self.value


@dataclass
class Timer:
    name: str
    start: float | None = None
    elapsed: float = 0.0

    def __enter__(self):  # noqa: ANN001
        self.start = _clock()
        return self

    def __exit__(self, exc_type, exc, tb):  # noqa: ANN001, ANN201
        now = _clock()
        self.elapsed = now - (self.start if self.start is not None else now)
        return False

    @property
    def elapsed_ms(self) -> int:
        return max(0, int(self.elapsed * 1000))


_EXPLICIT_SCOPE: contextvars.ContextVar[Hashable | None] = contextvars.ContextVar(
    "timedldap_scope", default=None
)


def _running_task() -> "asyncio.Task | None":
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None


def current_scope_key() -> Hashable:
    """Resolve the isolation scope for the calling execution unit."""
    key = _EXPLICIT_SCOPE.get()
    if key is not None:
        return ("explicit", key)
    task = _running_task()
    if task is not None:
        return ("task", task)
    return ("thread", threading.get_ident())


class _ThreadScope:
    # per-thread holder; hashed by identity so it can sit in a WeakSet
    __slots__ = ("snapshot", "__weakref__")

    def __init__(self) -> None:
        self.snapshot: Dict[str, int] = {}


class MetricsRegistry:
    """Isolation-scope keyed store of phase timings.

    Explicit scopes live until ``discard``. Task scopes are keyed by the
    task object and dropped once the task finishes. Thread scopes live in
    a ``threading.local`` and go away with their thread.
    """

    def __init__(self) -> None:
        self._explicit: Dict[Hashable, Dict[str, int]] = {}
        self._tasks: "weakref.WeakKeyDictionary[asyncio.Task, Dict[str, int]]" = weakref.WeakKeyDictionary()
        self._local = threading.local()
        self._threads: "weakref.WeakSet[_ThreadScope]" = weakref.WeakSet()
        self._lock = threading.Lock()

    def _lookup(self, create: bool) -> Optional[Dict[str, int]]:
        key = _EXPLICIT_SCOPE.get()
        if key is not None:
            with self._lock:
                snap = self._explicit.get(key)
                if snap is None and create:
                    snap = self._explicit[key] = {}
            return snap
        task = _running_task()
        if task is not None:
            with self._lock:
                snap = self._tasks.get(task)
                if snap is None and create:
                    snap = self._tasks[task] = {}
                    task.add_done_callback(self._drop_task)
            return snap
        holder = getattr(self._local, "scope", None)
        if holder is None:
            if not create:
                return None
            holder = self._local.scope = _ThreadScope()
            with self._lock:
                self._threads.add(holder)
        return holder.snapshot

    def _drop_task(self, task: "asyncio.Task") -> None:
        with self._lock:
            self._tasks.pop(task, None)

    @contextmanager
    def scope(self, key: Hashable) -> Iterator[Hashable]:
        """Pin the isolation scope to ``key`` for the enclosed block."""
        if key is None:
            raise ValueError("scope key must not be None")
        token = _EXPLICIT_SCOPE.set(key)
        try:
            yield key
        finally:
            _EXPLICIT_SCOPE.reset(token)

    def record(self, phase: str | Phase, elapsed_ms: int) -> None:
        if elapsed_ms < 0:
            raise ValueError(f"negative duration for {phase}: {elapsed_ms}")
        snap = self._lookup(create=True)
        snap[str(phase)] = int(elapsed_ms)

    def snapshot(self) -> Dict[str, int]:
        return dict(self._lookup(create=False) or {})

    def reset(self) -> None:
        snap = self._lookup(create=False)
        if snap is not None:
            snap.clear()

    def discard(self) -> None:
        key = _EXPLICIT_SCOPE.get()
        task = _running_task()
        with self._lock:
            if key is not None:
                self._explicit.pop(key, None)
            elif task is not None:
                self._tasks.pop(task, None)
            else:
                holder = getattr(self._local, "scope", None)
                if holder is not None:
                    self._threads.discard(holder)
                    del self._local.scope

    def scopes(self) -> int:
        with self._lock:
            return len(self._explicit) + len(self._tasks) + len(self._threads)



DEFAULT_REGISTRY = MetricsRegistry()


def get_metrics() -> Dict[str, int]:
    return DEFAULT_REGISTRY.snapshot()


def reset_metrics() -> None:
    DEFAULT_REGISTRY.reset()
