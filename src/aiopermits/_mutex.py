#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from typing import TYPE_CHECKING, Any, TypeVar

from ._semaphore import Semaphore

if sys.version_info >= (3, 9):
    from collections.abc import Awaitable, Callable
else:
    from typing import Awaitable, Callable

if TYPE_CHECKING:
    from types import TracebackType

    from ._request import Acquisition, RequestInfo
    from ._signals import CancellationSignal
    from .lowlevel import Timer

    if sys.version_info >= (3, 11):
        from typing import Self
    else:
        from typing_extensions import Self

_T = TypeVar("_T")


class Mutex:
    """
    A semaphore of exactly one permit.

    It wraps a :class:`Semaphore` instead of inheriting from it, so the size
    can be read but never changed.

    Example:
        >>> async def update(mutex, state):
        ...     async with mutex:
        ...         state['counter'] += 1
    """

    __slots__ = (
        "__weakref__",
        "_semaphore",
    )

    def __new__(cls, /, *, timer: Timer | None = None) -> Self:
        """
        Create an unlocked mutex. *timer* schedules timeouts, as for
        :class:`Semaphore`.
        """

        self = object.__new__(cls)

        self._semaphore = Semaphore(1, timer=timer)

        return self

    def __getnewargs__(self, /) -> tuple[Any, ...]:
        return ()

    def __getstate__(self, /) -> None:
        """
        Disables the use of internal state for pickling and copying.
        """

        return None

    def __copy__(self, /) -> Self:
        return self.__class__(timer=self._semaphore._timer)

    def __repr__(self, /) -> str:
        cls = self.__class__
        cls_repr = f"{cls.__module__}.{cls.__qualname__}"

        if self._semaphore.locked():
            extra = f"locked, waiting={self._semaphore.waiting}"
        else:
            extra = "unlocked"

        return f"<{cls_repr}() at {id(self):#x} [{extra}]>"

    async def __aenter__(self, /) -> Self:
        await self._semaphore.acquire()

        return self

    async def __aexit__(
        self,
        /,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        await self._semaphore.__aexit__(exc_type, exc_value, traceback)

    def acquire(
        self,
        /,
        count: int = 1,
        *,
        cancellation: CancellationSignal | None = None,
        timeout: float | None = None,
    ) -> Acquisition:
        """
        Request the permit. See :meth:`Semaphore.acquire`.
        """

        return self._semaphore.acquire(
            count,
            cancellation=cancellation,
            timeout=timeout,
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

        return self._semaphore.acquire(
            count,
            cancellation=cancellation,
            timeout=timeout,
        )

    def release(self, /, count: int = 1) -> None:
        """
        Give the permit back. See :meth:`Semaphore.release`.
        """

        self._semaphore.release(count)

    def signal(self, /, count: int = 1) -> None:
        """
        Alias of :meth:`release`.
        """

        self._semaphore.release(count)

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
        Run *task* while holding the permit. See :meth:`Semaphore.exec`.
        """

        return await self._semaphore.exec(
            task,
            count,
            cancellation=cancellation,
            timeout=timeout,
        )

    def clear_queue(self, /) -> None:
        self._semaphore.clear_queue()

    def locked(self, /) -> bool:
        return self._semaphore.locked()

    @property
    def size(self, /) -> int:
        """
        Always 1.
        """

        return self._semaphore.size

    @property
    def available(self, /) -> int:
        return self._semaphore.available

    @property
    def waiting(self, /) -> int:
        return self._semaphore.waiting

    @property
    def queued(self, /) -> tuple[RequestInfo, ...]:
        return self._semaphore.queued
