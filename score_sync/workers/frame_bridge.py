"""Run store coroutines for a host that owns a frame loop.

The host calls :meth:`FrameLoopBridge.submit` to start an operation and
:meth:`FrameLoopBridge.poll` once per frame; callbacks for finished calls run
inside ``poll`` on the host's thread, so the frame loop never blocks on the
network.
"""
from __future__ import annotations

import asyncio
import logging
import threading
from concurrent.futures import Future
from typing import Any, Callable, Coroutine, Generic, TypeVar

T = TypeVar("T")


class PendingCall(Generic[T]):
    def __init__(self, future: Future, callback: Callable[[T | None], Any] | None, label: str):
        self._future = future
        self.callback = callback
        self.label = label
        self.delivered = False

    def done(self) -> bool:
        return self._future.done()

    def cancel(self) -> bool:
        return self._future.cancel()

    def cancelled(self) -> bool:
        return self._future.cancelled()

    def exception(self) -> BaseException | None:
        if not self._future.done() or self._future.cancelled():
            return None
        return self._future.exception()

    def result(self) -> T | None:
        """Result of a finished call; ``None`` if the operation raised or was cancelled."""
        if not self._future.done():
            raise RuntimeError(f"{self.label} has not completed yet")
        if self._future.cancelled() or self._future.exception() is not None:
            return None
        return self._future.result()


class FrameLoopBridge:
    def __init__(self, name: str = "score-sync"):
        self.name = name
        self.logger = logging.getLogger(__name__)
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._pending: list[PendingCall] = []
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> "FrameLoopBridge":
        if self.running:
            return self
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run_loop, name=f"{self.name}-loop", daemon=True)
        self._thread.start()
        self.logger.debug("frame bridge loop started")
        return self

    def stop(self, timeout: float = 5.0) -> None:
        """Stop the loop, cancel unfinished calls and deliver every outstanding callback.

        Must be called from the host thread, like :meth:`poll`.
        """
        if self._loop is None or self._thread is None:
            return
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(timeout)

        with self._lock:
            unfinished = [call for call in self._pending if not call.done()]
        for call in unfinished:
            call.cancel()

        if not self._thread.is_alive():
            self._loop.close()
        self._loop = None
        self._thread = None
        self.logger.debug("frame bridge loop stopped")
        self.poll()

    def submit(
        self,
        operation: Coroutine[Any, Any, T],
        callback: Callable[[T | None], Any] | None = None,
        label: str | None = None,
    ) -> PendingCall[T]:
        if not self.running:
            operation.close()
            raise RuntimeError("frame bridge is not running, call start() first")

        future = asyncio.run_coroutine_threadsafe(operation, self._loop)
        call = PendingCall(future, callback, label or getattr(operation, "__qualname__", "operation"))
        with self._lock:
            self._pending.append(call)
        return call

    def poll(self) -> int:
        """Deliver callbacks of finished calls on the calling thread."""
        finished: list[PendingCall] = []
        still_pending: list[PendingCall] = []
        with self._lock:
            for call in self._pending:
                (finished if call.done() else still_pending).append(call)
            self._pending = still_pending

        for call in finished:
            if call.cancelled():
                self.logger.warning("%s cancelled before completion", call.label)
            else:
                error = call.exception()
                if error is not None:
                    self.logger.error("%s failed", call.label, exc_info=error)
            call.delivered = True
            if call.callback is None:
                continue
            try:
                call.callback(call.result())
            except Exception:
                self.logger.exception("%s callback failed", call.label)
        return len(finished)

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def __enter__(self) -> "FrameLoopBridge":
        return self.start()

    def __exit__(self, *exc_info) -> None:
        self.stop()

    def _run_loop(self) -> None:
        loop = self._loop
        asyncio.set_event_loop(loop)
        try:
            loop.run_forever()
        finally:
            tasks = asyncio.all_tasks(loop)
            for task in tasks:
                task.cancel()
            if tasks:
                loop.run_until_complete(asyncio.gather(*tasks, return_exceptions=True))
            loop.run_until_complete(loop.shutdown_default_executor())
