"""Trailing-edge debouncer for rapid input events.

Calling a :class:`Debouncer` repeatedly within its delay collapses the calls
into one invocation of the wrapped callback, fired ``delay_ms`` after the
last call and with that call's arguments. There is no leading-edge call.

The timer runs on the asyncio event loop, so the callback always executes
on the loop thread between other events.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)


class Debouncer:
    """Cancellable trailing-edge debounce wrapper around a callback.

    Args:
        callback: Function invoked with the arguments of the last call
        delay_ms: Quiet period in milliseconds
        loop: Event loop for the timer. Defaults to the running loop at
            call time.
    """

    def __init__(
        self,
        callback: Callable[..., Any],
        delay_ms: float,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        if delay_ms < 0:
            msg = f"delay_ms must be >= 0, got {delay_ms}"
            raise ValueError(msg)

        self.callback = callback
        self.delay_ms = delay_ms
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None
        self._pending_args: tuple[Any, ...] = ()
        self._pending_kwargs: dict[str, Any] = {}

    @property
    def pending(self) -> bool:
        """Whether a call is waiting for the quiet period to end."""
        return self._handle is not None

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        """Schedule the callback, replacing any call still waiting."""
        self._cancel_timer()

        loop = self._loop or asyncio.get_running_loop()
        self._pending_args = args
        self._pending_kwargs = kwargs
        self._handle = loop.call_later(self.delay_ms / 1000, self._fire)

    def cancel(self) -> None:
        """Drop the waiting call, if any. Used when the consumer is torn down."""
        if self._handle is not None:
            logger.debug("Cancelled pending debounced call to %r", self.callback)
        self._cancel_timer()
        self._pending_args = ()
        self._pending_kwargs = {}

    def flush(self) -> None:
        """Run the waiting call immediately instead of after the delay."""
        if self._handle is None:
            return
        self._cancel_timer()
        self._fire()

    def _cancel_timer(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        args, kwargs = self._pending_args, self._pending_kwargs
        self._pending_args = ()
        self._pending_kwargs = {}
        self.callback(*args, **kwargs)
