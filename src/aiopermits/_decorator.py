#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from functools import partial
from inspect import iscoroutinefunction
from typing import TYPE_CHECKING, Any, Protocol, TypeVar

from wrapt import decorator

from ._options import check_cancellation, check_count, check_timeout

if sys.version_info >= (3, 9):
    from collections.abc import Awaitable, Callable
else:
    from typing import Awaitable, Callable

if TYPE_CHECKING:
    from ._signals import CancellationSignal

_T = TypeVar("_T")
_CallableT = TypeVar("_CallableT", bound=Callable[..., Any])


class _Executor(Protocol):
    @property
    def size(self, /) -> int: ...

    async def exec(
        self,
        task: Callable[[], Awaitable[_T] | _T],
        /,
        count: int = 1,
        *,
        cancellation: CancellationSignal | None = None,
        timeout: float | None = None,
    ) -> _T: ...


def synchronized(
    primitive: _Executor,
    /,
    count: int = 1,
    *,
    cancellation: CancellationSignal | None = None,
    timeout: float | None = None,
) -> Callable[[_CallableT], _CallableT]:
    """
    Return a decorator that runs every call of a coroutine function under
    *primitive*, holding *count* permits for the duration of the call.

    The arguments are validated once, at decoration time, against the current
    size of *primitive*.

    Raises:
      TypeError:
        if *primitive* has no ``exec()`` method, or if the decorated function
        is not a coroutine function.
      InvalidArgument:
        if *count*, *cancellation* or *timeout* is malformed.

    Example:
        >>> sem = Semaphore(3)
        >>> @synchronized(sem)
        ... async def fetch(url):
        ...     ...  # at most three fetches run at once
    """

    if not hasattr(primitive, "exec"):
        msg = f"a semaphore or a mutex was expected, got {primitive!r}"
        raise TypeError(msg)

    count = check_count(count, primitive.size)
    cancellation = check_cancellation(cancellation)
    timeout = check_timeout(timeout)

    @decorator
    async def _synchronized(wrapped, instance, args, kwargs, /):
        return await primitive.exec(
            partial(wrapped, *args, **kwargs),
            count,
            cancellation=cancellation,
            timeout=timeout,
        )

    def _decorate(wrapped: _CallableT, /) -> _CallableT:
        if not iscoroutinefunction(wrapped):
            msg = f"a coroutine function was expected, got {wrapped!r}"
            raise TypeError(msg)

        return _synchronized(wrapped)

    return _decorate
