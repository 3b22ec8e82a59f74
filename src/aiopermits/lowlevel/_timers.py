#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import asyncio
import sys

from typing import Any, Protocol

from ._libraries import ensure_supported_library

if sys.version_info >= (3, 9):
    from collections.abc import Callable
else:
    from typing import Callable


class TimerHandle(Protocol):
    """
    A scheduled callback that can still be withdrawn.
    """

    __slots__ = ()

    def cancel(self, /) -> None:
        """
        Withdraw the callback. Calling it after the callback has run, or more
        than once, must be harmless.
        """


class Timer(Protocol):
    """
    Anything that can run a callback after a delay.

    :class:`asyncio.AbstractEventLoop` satisfies this protocol, so the running
    loop is the default timer.
    """

    __slots__ = ()

    def call_later(
        self,
        delay: float,
        callback: Callable[..., Any],
        /,
    ) -> TimerHandle:
        """
        Schedule *callback* to run no earlier than *delay* seconds from now.
        """


def get_default_timer() -> Timer:
    """
    Return the timer of the running async library.
    """

    library = ensure_supported_library()

    if library == "asyncio":
        return asyncio.get_running_loop()

    msg = f"unsupported async library {library!r}"
    raise RuntimeError(msg)
