"""Cache-aware fetch orchestration for a single list view.

One coordinator per mounted view. It owns the query (search, filters, page) and
a generation counter; the list it fetches is written to the view's ``ListState``
and to the shared cache.

Phases:
- IDLE: mounted, nothing requested yet
- DEBOUNCING: a search keystroke is waiting for the quiet window to elapse
- FETCHING: a network call for the current generation is outstanding
- SETTLED: the current generation has been published (or failed)

Every fetch that is initiated, cache hit or not, takes a new generation. A
response is only written back when its generation is still the latest one, so a
slow answer for "a" can never overwrite the answer for "ab". Redundant in-flight
requests are allowed; the generation check is what keeps the final state right.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from marketplace_admin.app.cache.service import CacheService
from marketplace_admin.app.infrastructure.logging.logger import get_logger, log_action
from marketplace_admin.app.state import ListState
from marketplace_admin.app.ui.filters import clean_filters

DEFAULT_DEBOUNCE_SECONDS = 0.5
DEFAULT_LIMIT = 10

FetchFn = Callable[[dict[str, Any]], Awaitable[Any]]

logger = get_logger("marketplace_admin.fetch")


class FetchPhase(str, Enum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    FETCHING = "fetching"
    SETTLED = "settled"


@dataclass
class FetchState:
    search_term: str = ""
    debounced_search_term: str = ""
    filters: dict[str, Any] = field(default_factory=dict)
    page: int = 1
    limit: int = DEFAULT_LIMIT
    generation: int = 0

    def params(self, search_param: str = "search") -> dict[str, Any]:
        params: dict[str, Any] = {"page": self.page, "limit": self.limit, search_param: self.debounced_search_term}
        for key, value in self.filters.items():
            params.setdefault(key, value)
        return params


class FetchCoordinator:
    def __init__(
        self,
        resource: str,
        fetch: FetchFn,
        cache: CacheService,
        view_state: ListState | None = None,
        *,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        limit: int = DEFAULT_LIMIT,
        filters: Mapping[str, Any] | None = None,
        search_param: str = "search",
        fixed_params: Mapping[str, Any] | None = None,
        ttl_seconds: float | None = None,
    ) -> None:
        self.resource = resource
        self.cache = cache
        self.view_state = view_state if view_state is not None else ListState()
        self.debounce_seconds = max(0.0, debounce_seconds)
        self.search_param = search_param
        self.fixed_params = clean_filters(fixed_params or {})
        self.ttl_seconds = ttl_seconds
        self.state = FetchState(limit=max(1, int(limit)), filters=clean_filters(filters or {}))
        self.phase = FetchPhase.IDLE
        self._fetch = fetch
        self._timer: asyncio.Task[Any] | None = None
        self._background: list[asyncio.Task[Any]] = []
        self._failure: tuple[int, Exception] | None = None
        self._closed = False

    @property
    def generation(self) -> int:
        return self.state.generation

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def params(self) -> dict[str, Any]:
        return {**self.state.params(self.search_param), **self.fixed_params}

    @property
    def cache_key(self) -> str:
        return self.cache.key_for(self.resource, self.params)

    async def start(self) -> Any:
        return await self._run_fetch()

    def set_search(self, term: str) -> None:
        """Record a keystroke and restart the quiet-window timer. Needs a running loop."""
        if self._closed:
            return
        self.state.search_term = term
        self._cancel_timer()
        self.phase = FetchPhase.DEBOUNCING
        timer = asyncio.get_running_loop().create_task(self._debounce())
        self._timer = timer
        self._background.append(timer)
        timer.add_done_callback(self._on_background_done)

    async def flush(self) -> Any:
        if self._timer is None:
            return await self.wait_idle()
        self._cancel_timer()
        return await self._commit_search()

    async def wait_idle(self) -> Any:
        """Wait for debounced work to finish.

        Re-raises the error of a failed debounced fetch, but only while its generation
        is still the current one; failures of superseded searches were dropped with them.
        """
        while self._background:
            await asyncio.wait({self._background.pop(0)})
        failure, self._failure = self._failure, None
        if failure is not None and failure[0] == self.state.generation:
            raise failure[1]
        return self.view_state.value

    async def set_filters(self, filters: Mapping[str, Any], *, replace: bool = False) -> Any:
        if self._closed:
            return None
        merged = dict(filters) if replace else {**self.state.filters, **filters}
        cleaned = clean_filters(merged)
        if cleaned == self.state.filters:
            return self.view_state.value
        self.state.filters = cleaned
        self.state.page = 1
        return await self._run_fetch()

    async def set_filter(self, key: str, value: Any) -> Any:
        return await self.set_filters({key: value})

    async def clear_filters(self) -> Any:
        return await self.set_filters({}, replace=True)

    async def set_page(self, page: int) -> Any:
        if self._closed:
            return None
        target = max(1, int(page))
        if target == self.state.page:
            return self.view_state.value
        self.state.page = target
        return await self._run_fetch()

    async def set_limit(self, limit: int) -> Any:
        if self._closed:
            return None
        target = max(1, int(limit))
        if target == self.state.limit:
            return self.view_state.value
        self.state.limit = target
        self.state.page = 1
        return await self._run_fetch()

    async def refresh(self, *, force: bool = False) -> Any:
        return await self._run_fetch(force_refresh=force)

    def close(self) -> None:
        self._cancel_timer()
        self._closed = True
        # Anything still in flight now belongs to a dead generation.
        self.state.generation += 1
        self.phase = FetchPhase.IDLE

    async def _debounce(self) -> Any:
        await asyncio.sleep(self.debounce_seconds)
        # Past the quiet window: later keystrokes schedule a new timer instead of cancelling this fetch.
        self._timer = None
        return await self._commit_search(background=True)

    async def _commit_search(self, *, background: bool = False) -> Any:
        term = self.state.search_term.strip()
        if term != self.state.debounced_search_term:
            self.state.debounced_search_term = term
            self.state.page = 1
        return await self._run_fetch(background=background)

    async def _run_fetch(self, *, force_refresh: bool = False, background: bool = False) -> Any:
        if self._closed:
            return None
        self.state.generation += 1
        generation = self.state.generation
        params = self.params

        if not force_refresh:
            cached = self.cache.get_cache(self.resource, params)
            if cached is not None:
                self.view_state.publish(cached, generation)
                self._settle()
                self._log("cache_hit", generation)
                return cached

        self.phase = FetchPhase.FETCHING
        self.view_state.begin()
        self._log("network_fetch", generation, force_refresh=force_refresh)
        try:
            value = await self._fetch(dict(params))
        except Exception as error:
            current = generation == self.state.generation
            if current:
                self.view_state.fail(error)
                self._settle()
            if not background:
                self._log("network_fetch", generation, outcome="error", level=logging.WARNING, error=str(error))
                raise
            # Nobody awaits a debounced fetch; wait_idle() raises it if it is still current.
            if current:
                self._failure = (generation, error)
            self._log("debounced_fetch", generation, outcome="error", level=logging.WARNING, error=str(error), current=current)
            return None

        if generation != self.state.generation:
            self._log("stale_response", generation, outcome="discarded", current=self.state.generation)
            return None

        self.cache.set_cache(self.resource, value, params, ttl_seconds=self.ttl_seconds)
        self.view_state.publish(value, generation)
        self._settle()
        return value

    def _settle(self) -> None:
        self.phase = FetchPhase.DEBOUNCING if self._timer is not None else FetchPhase.SETTLED

    def _cancel_timer(self) -> None:
        timer = self._timer
        if timer is None:
            return
        self._timer = None
        timer.cancel()
        if timer in self._background:
            self._background.remove(timer)

    def _on_background_done(self, task: asyncio.Task[Any]) -> None:
        if task in self._background:
            self._background.remove(task)

    def _log(self, action: str, generation: int, outcome: str = "ok", level: int = logging.DEBUG, **fields: Any) -> None:
        log_action(logger, module=self.resource, action=action, outcome=outcome, level=level, generation=generation, **fields)
