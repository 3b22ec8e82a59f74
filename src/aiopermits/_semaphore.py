#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from collections import deque
from inspect import isawaitable
from logging import Logger, getLogger
from typing import TYPE_CHECKING, Any, Final, TypeVar

from ._exceptions import (
    Aborted,
    Cleared,
    InvalidArgument,
    OverRelease,
    TimedOut,
    TooLargeForResize,
)
from ._options import (
    AcquireOptions,
    check_count,
    check_size,
    normalize_options,
)
from ._request import Acquisition, PendingRequest, RequestInfo
from .lowlevel import Timer, create_future, get_default_timer

if sys.version_info >= (3, 9):
    from collections.abc import Awaitable, Callable
else:
    from typing import Awaitable, Callable

if TYPE_CHECKING:
    from types import TracebackType

    from ._signals import CancellationSignal

    if sys.version_info >= (3, 11):
        from typing import Self
    else:
        from typing_extensions import Self

LOGGER: Final[Logger] = getLogger(__name__)

_T = TypeVar("_T")


class Semaphore:
    """
    A counting semaphore for tasks of one event loop.

    Requests are served strictly in the order :meth:`acquire` was called. A
    request for several permits is a single entry of the queue: permits are
    reserved for it one by one as they free up, and it blocks every request
    behind it until it is fully granted. Large requests are therefore never
    starved by a stream of small ones, at the cost of small requests waiting
    behind a large one.

    The semaphore is not thread-safe. All operations except awaiting an
    acquisition are synchronous and complete before any other task can
    observe the semaphore.

    Example:
        >>> async def main():
        ...     sem = Semaphore(3)
        ...     await sem.acquire(2)
        ...     try:
        ...         print(sem.available)
        ...     finally:
        ...         sem.release(2)
        >>> asyncio.run(main())
        1
    """

    __slots__ = (
        "__weakref__",
        "_borrowed",
        "_queue",
        "_reserved",
        "_size",
        "_timer",
        "_waiting",
    )

    def __new__(cls, /, size: int = 1, *, timer: Timer | None = None) -> Self:
        """
        Create a semaphore of *size* permits.

        Args:
          size:
            The number of permits that can be held at once. Must be a positive
            integer.
          timer:
            Schedules the timeouts of acquisitions. Defaults to the running
            event loop.

        Raises:
          InvalidArgument:
            if *size* is not a positive integer.
        """

        self = object.__new__(cls)

        self._size = check_size(size)
        self._timer = timer

        self._borrowed = 0
        self._reserved = 0
        self._waiting = 0

        self._queue = deque()

        return self

    def __getnewargs__(self, /) -> tuple[Any, ...]:
        """
        Returns arguments that can be used to create new instances with the
        same size.

        Used by:

        * The :mod:`pickle` module for pickling.
        * The :mod:`copy` module for copying.

        The current state does not affect the arguments.
        """

        return (self._size,)

    def __getstate__(self, /) -> None:
        """
        Disables the use of internal state for pickling and copying.
        """

        return None

    def __copy__(self, /) -> Self:
        return self.__class__(self._size, timer=self._timer)

    def __repr__(self, /) -> str:
        cls = self.__class__
        cls_repr = f"{cls.__module__}.{cls.__qualname__}"

        object_repr = f"{cls_repr}({self._size!r})"

        available = self.available

        if available > 0:
            extra = f"available={available}"
        else:
            extra = f"available={available}, waiting={self._waiting}"

        return f"<{object_repr} at {id(self):#x} [{extra}]>"

    async def __aenter__(self, /) -> Self:
        await self.acquire()

        return self

    async def __aexit__(
        self,
        /,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self._release(1)

    def _free(self, /) -> int:
        # negative while the semaphore is shrunk below what is outstanding
        return self._size - self._borrowed - self._reserved

    def _dispatch(self, /) -> None:
        queue = self._queue

        while queue and (free := self._free()) > 0:
            head = queue[0]

            if head.future.cancelled():
                # the awaiting task was cancelled and has not cleaned up yet
                self._remove(head)
                head.abandon()
                continue

            grant = min(free, head.remaining)

            head.granted += grant

            self._reserved += grant
            self._waiting -= grant

            if head.remaining:
                break

            queue.popleft()

            self._reserved -= head.requested
            self._borrowed += head.requested

            head.fulfil()

    def _remove(self, request: PendingRequest, /) -> None:
        self._queue.remove(request)

        self._reserved -= request.granted
        self._waiting -= request.remaining

        request.granted = 0

    def _reject(self, request: PendingRequest, exc: BaseException, /) -> bool:
        if not request.pending:
            return False

        returned = request.granted

        self._remove(request)

        request.reject(exc)

        LOGGER.debug(
            "%r rejected a request for %d permit(s), returning %d: %r",
            self,
            request.requested,
            returned,
            exc,
        )

        self._dispatch()

        return True

    def _withdraw(self, request: PendingRequest, /) -> bool:
        if not request.pending:
            return False

        self._remove(request)

        request.abandon()

        self._dispatch()

        return True

    def _release(self, count: int, /) -> None:
        if count > self._borrowed:
            msg = (
                f"semaphore released too many times: {count} permit(s)"
                f" released while {self._borrowed} are held"
            )
            raise OverRelease(msg)

        self._borrowed -= count

        self._dispatch()

    def _acquire(self, options: AcquireOptions, /) -> Acquisition:
        request = PendingRequest(options.count, create_future())
        acquisition = Acquisition(self, request)

        cancellation = options.cancellation

        if cancellation is not None and cancellation.triggered:
            request.reject(Aborted(cancellation.reason))

            return acquisition

        self._queue.append(request)
        self._waiting += request.requested

        self._dispatch()

        if request.pending:
            try:
                if cancellation is not None:
                    self._subscribe(request, cancellation)

                if options.timeout is not None:
                    self._schedule_timeout(request, options.timeout)
            except BaseException:
                # nobody will ever see the handle
                self._withdraw(request)
                raise

        return acquisition

    def _subscribe(
        self,
        request: PendingRequest,
        cancellation: CancellationSignal,
        /,
    ) -> None:
        def on_trigger() -> None:
            self._reject(request, Aborted(cancellation.reason))

        request.add_cleanup(cancellation.subscribe(on_trigger))

    def _schedule_timeout(
        self,
        request: PendingRequest,
        timeout: float,
        /,
    ) -> None:
        timer = self._timer

        if timer is None:
            timer = get_default_timer()

        def on_timeout() -> None:
            self._reject(request, TimedOut(timeout))

        request.add_cleanup(timer.call_later(timeout, on_timeout).cancel)

    def acquire(
        self,
        /,
        count: int = 1,
        *,
        cancellation: CancellationSignal | None = None,
        timeout: float | None = None,
    ) -> Acquisition:
        """
        Request *count* permits.

        The request joins the queue at call time and is granted as soon as
        every earlier request is served and enough permits are free. Await the
        returned handle to wait for it.

        Args:
          count:
            How many permits are needed, between 1 and :attr:`size`.
          cancellation:
            A signal that, once triggered, rejects the request with
            :exc:`Aborted`. An already triggered signal rejects it at once.
          timeout:
            Seconds to wait before the request is rejected with
            :exc:`TimedOut`. Only bounds the waiting, never the work done
            after the permits are granted.

        Returns:
          An awaitable handle resolving to *count*.

        Raises:
          InvalidArgument:
            if an argument is malformed (raised immediately).
          RuntimeError:
            if there is no running event loop.

        Example:
            >>> async def worker(sem):
            ...     await sem.acquire(2, timeout=5)
            ...     try:
            ...         ...  # use two permits
            ...     finally:
            ...         sem.release(2)
        """

        return self._acquire(
            normalize_options(self._size, count, cancellation, timeout)
        )

    def wait(
        self,
        /,
        count: int = 1,
        *,
        cancellation: CancellationSignal | None = None,
        timeout: float | None = None,
    ) -> Acquisition:
        """
        Alias of :meth:`acquire`.
        """

        return self.acquire(count, cancellation=cancellation, timeout=timeout)

    def release(self, /, count: int = 1) -> None:
        """
        Give back *count* permits and hand them to the queue in order.

        Raises:
          InvalidArgument:
            if *count* is not an integer between 1 and :attr:`size`.
          OverRelease:
            if fewer than *count* permits are held. Nothing is released then.
        """

        self._release(check_count(count, self._size))

    def signal(self, /, count: int = 1) -> None:
        """
        Alias of :meth:`release`.
        """

        self.release(count)

    async def exec(
        self,
        task: Callable[[], Awaitable[_T] | _T],
        /,
        count: int = 1,
        *,
        cancellation: CancellationSignal | None = None,
        timeout: float | None = None,
    ) -> _T:
        """
        Acquire *count* permits, run *task* and release them.

        *task* is called without arguments; if it returns an awaitable, that
        is awaited too. The permits are released exactly once whether the
        task returns or raises, and its result or exception is passed through
        unchanged. If the acquisition fails, nothing is released and its
        error propagates.

        Raises:
          InvalidArgument:
            if *task* is not callable or another argument is malformed.
        """

        if not callable(task):
            msg = f"task must be callable, got {task!r}"
            raise InvalidArgument(msg)

        options = normalize_options(self._size, count, cancellation, timeout)

        await self._acquire(options)

        try:
            result = task()

            if isawaitable(result):
                result = await result

            return result
        finally:
            self._release(options.count)

    def clear_queue(self, /) -> None:
        """
        Reject every queued request with :exc:`Cleared`.

        Permits already reserved for them return to the semaphore. The size is
        not changed.
        """

        requests = list(self._queue)

        self._queue.clear()

        for request in requests:
            self._reserved -= request.granted
            self._waiting -= request.remaining

            request.granted = 0

            request.reject(Cleared())

        if requests:
            LOGGER.debug("%r cleared %d request(s)", self, len(requests))

        self._dispatch()

    def locked(self, /) -> bool:
        """
        Return :data:`True` if an acquisition of one permit would wait.
        """

        return self.available == 0

    @property
    def size(self, /) -> int:
        """
        The maximum number of permits held at once.

        Assigning a new size takes effect immediately. Growing wakes as many
        queued permit units as now fit. Shrinking rejects every queued request
        larger than the new size with :exc:`TooLargeForResize`; permits held
        above the new size stay valid and are absorbed as they are released.
        Growth after such a shrink first repays that debt, so queued requests
        only receive the permits left over.
        """

        return self._size

    @size.setter
    def size(self, /, value: int) -> None:
        size = check_size(value)

        old_size, self._size = self._size, size

        oversized = [
            request for request in self._queue if request.requested > size
        ]

        for request in oversized:
            self._remove(request)

            request.reject(TooLargeForResize(request.requested, size))

        LOGGER.debug(
            "%r resized from %d to %d, rejecting %d request(s)",
            self,
            old_size,
            size,
            len(oversized),
        )

        self._dispatch()

    @property
    def available(self, /) -> int:
        """
        The number of permits that are neither held nor reserved.
        """

        return max(0, self._free())

    @property
    def waiting(self, /) -> int:
        """
        The number of permit units still owed to queued requests.
        """

        return self._waiting

    @property
    def queued(self, /) -> tuple[RequestInfo, ...]:
        """
        Snapshots of the queued requests, head first.
        """

        return tuple(request.info() for request in self._queue)

