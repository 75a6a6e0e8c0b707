"""Push-based live queries over the durable collections."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Generic, TypeVar

FOOD_ITEMS = "food_items"
LOGGED_ENTRIES = "logged_entries"
SETTINGS = "settings"

T = TypeVar("T")

_logger = logging.getLogger(__name__)


class ChangeNotifier:
    """Fans out change signals for named collections to live queries."""

    def __init__(self) -> None:
        self._listeners: dict[str, set["LiveQuery[object]"]] = {}

    def notify(self, topic: str) -> None:
        """Mark every live query watching ``topic`` as stale."""
        for query in list(self._listeners.get(topic, ())):
            query.mark_stale()

    def register(self, query: "LiveQuery[object]", topics: Iterable[str]) -> None:
        for topic in topics:
            self._listeners.setdefault(topic, set()).add(query)

    def unregister(self, query: "LiveQuery[object]") -> None:
        for listeners in self._listeners.values():
            listeners.discard(query)

    def listener_count(self, topic: str) -> int:
        return len(self._listeners.get(topic, ()))


class LiveQuery(Generic[T]):
    """Async iterator of snapshots, refreshed whenever a watched topic changes.

    The first iteration yields the current snapshot. Each later iteration
    waits for at least one change and reloads once, so bursts of changes are
    conflated into a single snapshot. ``close()`` stops the iteration and
    releases the registration.
    """

    def __init__(
        self,
        loader: Callable[[], Awaitable[T]],
        notifier: ChangeNotifier,
        topics: Iterable[str],
    ) -> None:
        self._loader = loader
        self._notifier = notifier
        self._stale = asyncio.Event()
        self._started = False
        self._closed = False
        topics = tuple(topics)
        notifier.register(self, topics)
        _logger.debug("Live query opened: topics=%s", ",".join(topics))

    @property
    def closed(self) -> bool:
        return self._closed

    def mark_stale(self) -> None:
        self._stale.set()

    async def first(self) -> T:
        """Return the current snapshot and close the query."""
        try:
            return await self._loader()
        finally:
            self.close()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._notifier.unregister(self)
        self._stale.set()

    def __aiter__(self) -> "LiveQuery[T]":
        return self

    async def __anext__(self) -> T:
        if self._closed:
            raise StopAsyncIteration
        if self._started:
            await self._stale.wait()
            if self._closed:
                raise StopAsyncIteration
        self._started = True
        self._stale.clear()
        return await self._loader()

    async def __aenter__(self) -> "LiveQuery[T]":
        return self

    async def __aexit__(self, *_exc_info: object) -> None:
        self.close()

