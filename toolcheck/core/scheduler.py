"""Cooperative scheduler — many suspendable tasks on one asyncio event loop.

Tasks are dispatched fire-and-forget and never joined individually;
``run_until_idle`` blocks the calling thread until every dispatched task,
including tasks dispatched by other tasks, has finished.

Lifecycle:
    scheduler = CooperativeScheduler()
    scheduler.dispatch(body)          # queued, starts once the loop runs
    scheduler.run_until_idle(main)    # main may dispatch more

There is no cancellation: a task that never finishes keeps
``run_until_idle`` from returning.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import deque
from collections.abc import Awaitable, Callable, Generator
from dataclasses import dataclass
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

TaskBody = Callable[[], Any]


class TaskState(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    SUSPENDED = "suspended"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class _TaskHandle:
    name: str
    body: TaskBody
    state: TaskState = TaskState.PENDING


class _Traced:
    """Awaitable that steps a coroutine and records when it yields to the loop."""

    def __init__(self, handle: _TaskHandle, coro: Awaitable[Any]) -> None:
        self._handle = handle
        self._iter = coro.__await__()

    def __await__(self) -> Generator[Any, Any, Any]:
        value: Any = None
        error: BaseException | None = None
        while True:
            self._handle.state = TaskState.RUNNING
            try:
                if error is not None:
                    yielded = self._iter.throw(error)
                else:
                    yielded = self._iter.send(value)
            except StopIteration as stop:
                return stop.value
            self._handle.state = TaskState.SUSPENDED
            try:
                value, error = (yield yielded), None
            except BaseException as e:
                value, error = None, e


class CooperativeScheduler:
    """Runs dispatched task bodies concurrently on a single thread."""

    def __init__(self) -> None:
        self._queue: deque[_TaskHandle] = deque()
        self._active: set[asyncio.Task[None]] = set()
        self._handles: list[_TaskHandle] = []
        self._loop: asyncio.AbstractEventLoop | None = None
        self._counter = 0

    @property
    def states(self) -> list[TaskState]:
        """Current state of every task dispatched so far."""
        return [h.state for h in self._handles]

    def dispatch(self, body: TaskBody, name: str | None = None) -> None:
        """Schedule ``body`` and return immediately."""
        self._counter += 1
        handle = _TaskHandle(name=name or f"task-{self._counter}", body=body)
        self._handles.append(handle)
        if self._loop is None:
            self._queue.append(handle)
        else:
            self._start(handle)

    def run_until_idle(self, main: TaskBody | None = None) -> int:
        """Run ``main`` and block until no task is pending, running or suspended.

        Returns the number of tasks dispatched over the scheduler's lifetime.
        """
        if self._loop is not None:
            raise RuntimeError("run_until_idle() is already draining this scheduler")
        asyncio.run(self._drain(main))
        return len(self._handles)

    # ── Internals ────────────────────────────────────────────────────────

    async def _drain(self, main: TaskBody | None) -> None:
        self._loop = asyncio.get_running_loop()
        try:
            while self._queue:
                self._start(self._queue.popleft())

            if main is not None:
                result = main()
                if inspect.isawaitable(result):
                    await result

            while self._active:
                await asyncio.wait(set(self._active))
        finally:
            self._loop = None

        logger.debug("Scheduler idle after %d tasks", len(self._handles))

    def _start(self, handle: _TaskHandle) -> None:
        assert self._loop is not None
        task = self._loop.create_task(self._drive(handle), name=handle.name)
        self._active.add(task)
        task.add_done_callback(self._active.discard)

    async def _drive(self, handle: _TaskHandle) -> None:
        handle.state = TaskState.RUNNING
        try:
            result = handle.body()
            if inspect.isawaitable(result):
                await _Traced(handle, result)
        except Exception:
            handle.state = TaskState.FAILED
            logger.exception("Task %s failed", handle.name)
        else:
            handle.state = TaskState.COMPLETED


def run_blocking(main: Callable[[CooperativeScheduler], Any]) -> int:
    """Run ``main`` on a fresh scheduler and wait for everything it dispatches."""
    scheduler = CooperativeScheduler()
    return scheduler.run_until_idle(lambda: main(scheduler))
