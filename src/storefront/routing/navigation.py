"""Navigation controllers: a stateful front for the route table.

Two variants share one public contract (``route``, ``params``, ``query``,
``target``, ``push``, ``start``, ``subscribe``) so render code never
knows which execution context created it:

- ``ServerRouter``: single-shot. Construct per render, push one URL,
  discard. It has no ambient location.
- ``ClientRouter``: long-lived. Reads the current location from a host
  environment on ``start()`` and records every ``push()`` in its history.

``create_router()`` picks the variant once, at construction.

Navigation never raises: a failure while resolving is logged, kept on
``last_fault``, and degrades to a no-match resolution so a long-lived
session survives.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Protocol, runtime_checkable
from urllib.parse import urlsplit

from storefront.errors import ConfigurationError, NavigationFault
from storefront.http.query import QueryMap, parse_query
from storefront.routing.observer import Observer, Subscriber
from storefront.routing.route import ResolvedRoute
from storefront.routing.table import RouteTable, normalize_base

logger = logging.getLogger("storefront.navigation")

_EMPTY: Mapping[str, str] = MappingProxyType({})


@dataclass(frozen=True, slots=True)
class NavigationState:
    """Snapshot of a navigator. Replaced as a whole on every transition."""

    route: ResolvedRoute | None = None
    query: QueryMap | None = None
    url: str | None = None
    resolved: bool = False


@runtime_checkable
class HostEnvironment(Protocol):
    """The interactive host a long-lived navigator runs inside."""

    @property
    def current_url(self) -> str: ...

    def push_state(self, url: str) -> None: ...


@dataclass(slots=True)
class MemoryHistory:
    """In-process host environment with a linear history stack."""

    initial_url: str = "/"
    entries: list[str] = field(default_factory=list)
    index: int = 0

    def __post_init__(self) -> None:
        if not self.entries:
            self.entries.append(self.initial_url)
        self.index = len(self.entries) - 1

    @property
    def current_url(self) -> str:
        return self.entries[self.index]

    def push_state(self, url: str) -> None:
        del self.entries[self.index + 1:]
        self.entries.append(url)
        self.index += 1

    def back(self) -> str:
        if self.index > 0:
            self.index -= 1
        return self.current_url


class Navigator(ABC):
    """Shared navigation contract over a ``RouteTable``.

    The navigator owns its ``NavigationState``; the table is a
    non-owning reference and may be shared between navigators.
    """

    __slots__ = ("_base_url", "_observer", "_state", "_table", "last_fault")

    def __init__(self, base_url: str = "", *, table: RouteTable | None = None) -> None:
        self._base_url = normalize_base(base_url)
        if table is None:
            table = RouteTable(base=self._base_url)
        elif table.base != self._base_url:
            msg = (
                f"Route table base {table.base!r} does not match "
                f"navigator base {self._base_url!r}"
            )
            raise ConfigurationError(msg)
        self._table = table
        self._observer = Observer()
        self._state = NavigationState()
        self.last_fault: NavigationFault | None = None

    # -- Accessors ---------------------------------------------------------

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def table(self) -> RouteTable:
        return self._table

    @property
    def state(self) -> NavigationState:
        return self._state

    @property
    def resolved(self) -> bool:
        """Whether ``push()`` or ``start()`` has run at least once."""
        return self._state.resolved

    @property
    def route(self) -> ResolvedRoute | None:
        return self._state.route

    @property
    def params(self) -> Mapping[str, str]:
        route = self._state.route
        return route.params if route is not None else _EMPTY

    @property
    def target(self) -> Any:
        """Handler of the current route, or ``None`` when nothing matched."""
        route = self._state.route
        return route.handler if route is not None else None

    @property
    def query(self) -> Mapping[str, str]:
        query = self._state.query
        return query if query is not None else _EMPTY

    @query.setter
    def query(self, value: str | Mapping[str, str] | None) -> None:
        if value is None:
            parsed = None
        elif isinstance(value, str):
            parsed = parse_query(value)
        else:
            parsed = dict(value)
        self._state = replace(self._state, query=parsed)

    parse_query = staticmethod(parse_query)

    # -- Registration and observers ---------------------------------------

    def add_route(self, pattern: str, handler: Any) -> None:
        self._table.register(pattern, handler)

    def subscribe(self, fn: Subscriber) -> Callable[[], None]:
        """Call *fn* after every transition. Returns an unsubscribe callable."""
        return self._observer.subscribe(fn)

    def unsubscribe(self, fn: Subscriber) -> bool:
        return self._observer.unsubscribe(fn)

    # -- Transitions -------------------------------------------------------

    def normalize(self, url: str) -> str:
        """Prefix *url* with the base path unless it already carries it."""
        if url.startswith(self._base_url):
            return url
        if not url.startswith("/"):
            url = "/" + url
        return self._base_url + url

    def push(self, url: str) -> None:
        """Navigate to *url*, store the resolution, and notify subscribers."""
        self._transition(url, lambda: self._enter(self.normalize(url)))

    def start(self) -> None:
        """Resolve the ambient location and notify subscribers."""
        try:
            location = self._location()
        except Exception as exc:
            self._fault(None, exc)
            return
        self._transition(location, lambda: self._enter(location, initial=True))

    def _transition(self, url: str, step: Callable[[], NavigationState]) -> None:
        try:
            state = step()
        except Exception as exc:
            self._fault(url, exc)
            return
        self.last_fault = None
        self._state = state
        self._observer.notify()

    def _fault(self, url: str | None, exc: Exception) -> None:
        logger.exception("Navigation to %r failed; treating as no match", url)
        self.last_fault = NavigationFault(url, exc)
        self._state = replace(self._state, route=None, url=url, resolved=True)
        self._observer.notify()

    def _enter(self, url: str, *, initial: bool = False) -> NavigationState:
        path = urlsplit(url).path
        route = self._table.resolve(path)
        return replace(self._state, route=route, url=url, resolved=True)

    @abstractmethod
    def _location(self) -> str:
        """The URL ``start()`` resolves."""


class ServerRouter(Navigator):
    """Single-shot navigator for one server render.

    There is no ambient location; ``start()`` resolves the base path.
    The query is whatever the caller assigned, never read from the URL.
    """

    __slots__ = ()

    def _location(self) -> str:
        return self._base_url or "/"


class ClientRouter(Navigator):
    """Long-lived navigator bound to a host environment.

    ``start()`` reads the environment's current location, ``push()``
    records the new URL in its history. Both refresh ``query`` from the
    URL, since the location carries it.
    """

    __slots__ = ("_environment",)

    def __init__(
        self,
        base_url: str = "",
        environment: HostEnvironment | None = None,
        *,
        table: RouteTable | None = None,
    ) -> None:
        super().__init__(base_url, table=table)
        self._environment = environment if environment is not None else MemoryHistory()

    @property
    def environment(self) -> HostEnvironment:
        return self._environment

    def _location(self) -> str:
        return self._environment.current_url

    def _enter(self, url: str, *, initial: bool = False) -> NavigationState:
        if not initial:
            self._environment.push_state(url)
        parts = urlsplit(url)
        route = self._table.resolve(parts.path)
        return replace(
            self._state,
            route=route,
            query=parse_query(parts.query),
            url=url,
            resolved=True,
        )


def create_router(
    base_url: str = "",
    environment: HostEnvironment | None = None,
    *,
    table: RouteTable | None = None,
) -> Navigator:
    """Build the navigator variant for the hosting execution context.

    With a host environment (an interactive session) this is a
    ``ClientRouter``; without one it is a single-shot ``ServerRouter``.
    """
    if environment is not None:
        return ClientRouter(base_url, environment, table=table)
    return ServerRouter(base_url, table=table)
