"""Serialization of snapshot rebuilds triggered by mutations."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from src.infrastructure.logging.logger import get_app_logger


class MutationCoordinator:
    """Run at most one rebuild at a time and coalesce excess requests.

    A rebuild has two steps: ``load`` reads the balance store (awaitable)
    and ``apply`` turns what was read into the new cache content. A request
    joins the scheduled rebuild while that rebuild has not started reading.
    Once reading has started, the request waits for a single pending rebuild
    that runs right after the current one; every later request joins that
    pending rebuild. A caller is therefore only released by a rebuild that
    read the store after the caller's mutation was written.
    """

    def __init__(
        self,
        load: Callable[[], Awaitable[Any]],
        apply: Callable[[Any], Any],
        logger=None,
    ) -> None:
        """Initialize the coordinator.

        Args:
            load: Coroutine function reading the store state.
            apply: Function building and installing the result of ``load``.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._load = load
        self._apply = apply
        self._logger = logger or get_app_logger()
        self._current: asyncio.Future | None = None
        self._pending: asyncio.Future | None = None
        self._read_started = False
        self._task: asyncio.Task | None = None
        self._build_count = 0

    @property
    def in_flight(self) -> bool:
        return self._current is not None

    @property
    def build_count(self) -> int:
        """Number of rebuilds started since creation."""
        return self._build_count

    async def after_mutation(self) -> Any:
        """Request a rebuild and wait until one covering it has completed.

        Returns:
            Any: Value returned by ``apply`` for the rebuild that served the
            request.

        Raises:
            Exception: Whatever ``load`` or ``apply`` raised for that rebuild.
        """
        loop = asyncio.get_running_loop()
        if self._current is None:
            future = self._schedule(loop)
        elif not self._read_started:
            future = self._current
        else:
            if self._pending is None:
                self._pending = loop.create_future()
                self._logger.debug("Queued snapshot rebuild behind running one")
            future = self._pending
        return await asyncio.shield(future)

    def _schedule(self, loop: asyncio.AbstractEventLoop) -> asyncio.Future:
        self._current = loop.create_future()
        self._read_started = False
        self._task = loop.create_task(self._drain())
        return self._current

    async def _drain(self) -> None:
        while self._current is not None:
            future = self._current
            self._read_started = True
            self._build_count += 1
            try:
                state = await self._load()
                result = self._apply(state)
            except asyncio.CancelledError:
                self._logger.warning("Snapshot rebuild cancelled")
                future.cancel()
                if self._pending is not None:
                    self._pending.cancel()
                    self._pending = None
                raise
            except Exception as exc:
                self._logger.error(f"Snapshot rebuild failed: {exc}")
                future.set_exception(exc)
            else:
                future.set_result(result)
            finally:
                self._current, self._pending = self._pending, None
                self._read_started = False


__all__ = ["MutationCoordinator"]
