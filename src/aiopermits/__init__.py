#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

"""
Fair counting semaphores for asyncio

This package provides a counting semaphore, and a mutex as its one-permit
special case, for tasks running on one event loop:

* requests are served strictly first come, first served
* a request may ask for several permits at once and is granted atomically
* pending requests can be abandoned via a cancellation signal, a timeout,
  task cancellation or by clearing the queue, without leaking permits
* the semaphore can be resized while in use

Example:
    >>> import asyncio
    >>> from aiopermits import Semaphore
    >>> async def main():
    ...     sem = Semaphore(3)
    ...     results = await asyncio.gather(
    ...         *(sem.exec(lambda i=i: i * i) for i in range(5))
    ...     )
    ...     print(results)
    >>> asyncio.run(main())
    [0, 1, 4, 9, 16]
"""

from __future__ import annotations

__author__: str = "Ilya Egorov <0x42005e1f@gmail.com>"

from importlib.metadata import PackageNotFoundError, version

from . import lowlevel  # noqa: F401
from ._decorator import (
    synchronized as synchronized,
)
from ._exceptions import (
    Aborted as Aborted,
    AcquireError as AcquireError,
    Cleared as Cleared,
    InvalidArgument as InvalidArgument,
    OverRelease as OverRelease,
    TimedOut as TimedOut,
    TooLargeForResize as TooLargeForResize,
)
from ._exports import export
from ._mutex import (
    Mutex as Mutex,
)
from ._options import (
    AcquireOptions as AcquireOptions,
)
from ._request import (
    Acquisition as Acquisition,
    RequestInfo as RequestInfo,
)
from ._semaphore import (
    Semaphore as Semaphore,
)
from ._signals import (
    AbortController as AbortController,
    AbortSignal as AbortSignal,
    CancellationSignal as CancellationSignal,
)

try:
    __version__: str = version("aiopermits")
except PackageNotFoundError:
    __version__ = "unknown"

# prepare for external use
export(globals())

del export
