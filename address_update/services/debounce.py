from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Hashable, Set

logger = logging.getLogger(__name__)


class Debouncer:
    """
    Delays a lookup until input has been quiet for `delay` seconds.

    Each key holds at most one pending timer; scheduling again cancels it
    outright. Every schedule also bumps a per-key generation, and a finished
    lookup only applies its result while its generation is still the newest,
    so a slow response can never overwrite a later one. Requests already in
    flight are left to finish.
    """

    def __init__(self, delay: float, name: str = "debounce") -> None:
        self.delay = delay
        self.name = name
        self._timers: Dict[Hashable, asyncio.TimerHandle] = {}
        self._generations: Dict[Hashable, int] = {}
        self._inflight: Set[asyncio.Task] = set()

    def schedule(
        self,
        key: Hashable,
        fetch: Callable[[], Awaitable[Any]],
        apply: Callable[[Any], None],
    ) -> int:
        self._cancel_timer(key)
        generation = self._generations.get(key, 0) + 1
        self._generations[key] = generation
        loop = asyncio.get_running_loop()
        self._timers[key] = loop.call_later(self.delay, self._fire, key, generation, fetch, apply)
        return generation

    def is_current(self, key: Hashable, generation: int) -> bool:
        return self._generations.get(key) == generation

    def pending(self, key: Hashable) -> bool:
        return key in self._timers

    def cancel(self, key: Hashable) -> None:
        # Bumping the generation also invalidates anything in flight for this key.
        self._cancel_timer(key)
        if key in self._generations:
            self._generations[key] += 1

    def cancel_all(self) -> None:
        for key in list(self._timers):
            self.cancel(key)

    async def wait_idle(self) -> None:
        while self._timers or self._inflight:
            if self._inflight:
                await asyncio.gather(*list(self._inflight), return_exceptions=True)
            else:
                await asyncio.sleep(self.delay)

    def _cancel_timer(self, key: Hashable) -> None:
        handle = self._timers.pop(key, None)
        if handle is not None:
            handle.cancel()

    def _fire(self, key, generation, fetch, apply) -> None:
        self._timers.pop(key, None)
        task = asyncio.ensure_future(self._run(key, generation, fetch, apply))
        self._inflight.add(task)
        task.add_done_callback(self._finished)

    def _finished(self, task: asyncio.Task) -> None:
        self._inflight.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("%s: lookup failed", self.name, exc_info=exc)

    async def _run(self, key, generation, fetch, apply) -> None:
        result = await fetch()
        if not self.is_current(key, generation):
            logger.debug("%s: discarding stale result for %s (generation %s)", self.name, key, generation)
            return
        apply(result)
