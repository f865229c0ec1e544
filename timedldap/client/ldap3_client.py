"""Directory collaborator backed by the ldap3 library.

Each ``acquire_context`` opens and binds a fresh connection; there is no
pooling here. Search bases are resolved relative to the client's root, so
``ou=users`` with root ``dc=example,dc=com`` searches
``ou=users,dc=example,dc=com``.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from ldap3 import SYNC, Connection, Server
from ldap3.core.exceptions import LDAPBindError, LDAPException

from ..config import Settings, load_settings
from ..telemetry.logging import get_logger
from .base import QueryProcessor, ResultHandler, SearchHit, SearchOptions

# success, sizeLimitExceeded
_OK_RESULTS = (0, 4)


class Ldap3DirectoryClient:
    def __init__(
        self,
        server: Server | str,
        user: Optional[str] = None,
        password: Optional[str] = None,
        base: str = "",
        *,
        client_strategy: str = SYNC,
        read_only: bool = True,
        receive_timeout: Optional[float] = None,
    ) -> None:
        self.server = Server(server) if isinstance(server, str) else server
        self.user = user
        self.password = password
        self.base = base
        self.client_strategy = client_strategy
        self.read_only = read_only
        self.receive_timeout = receive_timeout
        self._log = get_logger(__name__, {"server": self.server.host})

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **kwargs: Any) -> "Ldap3DirectoryClient":
        s = settings or load_settings()
        return cls(
            s.url,
            user=s.user,
            password=s.password,
            base=s.base,
            read_only=s.read_only,
            receive_timeout=s.receive_timeout,
            **kwargs,
        )

    def resolve_base(self, base: str) -> str:
        if not self.base:
            return base
        if not base:
            return self.base
        b, root = base.lower(), self.base.lower()
        if b == root or b.endswith("," + root):
            return base
        return f"{base},{self.base}"

    def acquire_context(self) -> Connection:
        conn = Connection(
            self.server,
            user=self.user,
            password=self.password,
            client_strategy=self.client_strategy,
            read_only=self.read_only,
            receive_timeout=self.receive_timeout,
            raise_exceptions=False,
        )
        if not conn.bind():
            desc = conn.result.get("description") if conn.result else None
            conn.unbind()
            self._log.warning("bind as %s failed: %s", self.user or "anonymous", desc)
            raise LDAPBindError(f"bind as {self.user or 'anonymous'} failed: {desc or 'unknown error'}")
        return conn

    def release_context(self, context: Connection) -> None:
        context.unbind()

    def search(
        self,
        context: Connection,
        base: str,
        filter: str,
        options: SearchOptions,
        handler: ResultHandler,
        processor: Optional[QueryProcessor] = None,
    ) -> None:
        request: Dict[str, Any] = {
            "search_base": self.resolve_base(base),
            "search_filter": filter,
            "search_scope": options.scope.value,
            "attributes": list(options.attributes),
            "size_limit": options.size_limit,
            "time_limit": options.time_limit,
            "types_only": options.types_only,
        }
        if processor is not None:
            processor.pre_process(context, request)
        self._log.debug("search base=%s filter=%s", request["search_base"], filter)
        context.search(**request)
        result = context.result or {}
        code = result.get("result", 0)
        if code not in _OK_RESULTS:
            raise LDAPException(
                f"search failed: {result.get('description', code)} {result.get('message', '')}".rstrip()
            )
        for entry in context.entries:
            handler.handle(SearchHit(dn=entry.entry_dn, attributes=dict(entry.entry_attributes_as_dict)))
        if processor is not None:
            processor.post_process(context)
