"""Debounced, latest-wins autocomplete over the food catalog."""

import asyncio
import logging
from collections.abc import Callable

from food_log.domain.catalog import CatalogEntry
from food_log.services.live import LiveQuery

DEBOUNCE_SECONDS = 0.3
MIN_QUERY_LENGTH = 2

_logger = logging.getLogger(__name__)


class SuggestionPipeline:
    """Turns pushed text-input values into a stream of suggestion lists.

    Per consumer state is one pending debounce timer and at most one active
    catalog query. Every new distinct input cancels both, so a superseded
    query never reaches the consumer. Inputs shorter than ``min_length``
    produce an empty list without querying, and a failing query degrades to
    an empty list.

    Usage::

        async with repository.suggestion_pipeline() as pipeline:
            pipeline.push("ap")
            async for suggestions in pipeline:
                ...
    """

    def __init__(
        self,
        watch: Callable[[str], LiveQuery[list[CatalogEntry]]],
        debounce_seconds: float = DEBOUNCE_SECONDS,
        min_length: int = MIN_QUERY_LENGTH,
    ) -> None:
        self.watch = watch
        self.debounce_seconds = debounce_seconds
        self.min_length = min_length
        self._output: asyncio.Queue[list[CatalogEntry] | None] = asyncio.Queue()
        self._last_input: str | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._active: asyncio.Task[None] | None = None
        self._closed = False

    def push(self, text: str) -> None:
        """Feed the latest value of the text input."""
        if self._closed:
            raise RuntimeError("Suggestion pipeline is closed")
        if text == self._last_input:
            return
        self._last_input = text
        self._cancel_pending()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.debounce_seconds, self._settle, text)

    def close(self) -> None:
        """Drop the pending timer and active query and end the stream."""
        if self._closed:
            return
        self._closed = True
        self._cancel_pending()
        self._output.put_nowait(None)

    def _cancel_pending(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._active is not None and not self._active.done():
            _logger.debug("Superseded suggestion query cancelled")
            self._active.cancel()
        self._active = None

    def _settle(self, text: str) -> None:
        self._timer = None
        if len(text) < self.min_length:
            self._output.put_nowait([])
            return
        self._active = asyncio.get_running_loop().create_task(self._follow(text))

    async def _follow(self, prefix: str) -> None:
        query: LiveQuery[list[CatalogEntry]] | None = None
        try:
            query = self.watch(prefix)
            async for suggestions in query:
                self._output.put_nowait(suggestions)
        except asyncio.CancelledError:
            raise
        except Exception:
            _logger.warning(
                "Suggestion query failed, showing none: prefix=%s", prefix, exc_info=True
            )
            self._output.put_nowait([])
        finally:
            if query is not None:
                query.close()

    def __aiter__(self) -> "SuggestionPipeline":
        return self

    async def __anext__(self) -> list[CatalogEntry]:
        if self._closed and self._output.empty():
            raise StopAsyncIteration
        suggestions = await self._output.get()
        if suggestions is None:
            raise StopAsyncIteration
        return suggestions

    async def __aenter__(self) -> "SuggestionPipeline":
        return self

    async def __aexit__(self, *_exc_info: object) -> None:
        self.close()
