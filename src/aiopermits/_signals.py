#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from logging import Logger, getLogger
from typing import Any, Final, Protocol, runtime_checkable

if sys.version_info >= (3, 9):
    from collections.abc import Callable
else:
    from typing import Callable

LOGGER: Final[Logger] = getLogger(__name__)


@runtime_checkable
class CancellationSignal(Protocol):
    """
    A notify-once capability that a caller can trigger to abandon pending
    acquisitions.

    The semaphore only relies on this narrow interface, so any object that
    provides it can be passed as ``cancellation``.
    """

    @property
    def triggered(self, /) -> bool:
        """
        :data:`True` once the signal has fired.
        """

    @property
    def reason(self, /) -> Any:
        """
        The value the signal was triggered with, or :data:`None`.
        """

    def subscribe(
        self,
        callback: Callable[[], object],
        /,
    ) -> Callable[[], None]:
        """
        Register *callback* to be called once when the signal fires, and
        return a function that withdraws it. The returned function must be
        idempotent.
        """


class AbortSignal:
    """
    The observable side of an :class:`AbortController`.

    Example:
        >>> controller = AbortController()
        >>> signal = controller.signal
        >>> signal.triggered
        False
        >>> unsubscribe = signal.subscribe(lambda: print('aborted'))
        >>> controller.abort()
        aborted
        >>> signal.triggered
        True
    """

    __slots__ = (
        "__weakref__",
        "_callbacks",
        "_reasons",
    )

    def __init__(self, /) -> None:
        self._callbacks = {}
        self._reasons = []

    def __repr__(self, /) -> str:
        cls = self.__class__
        cls_repr = f"{cls.__module__}.{cls.__qualname__}"

        if self._reasons:
            extra = f"triggered, reason={self._reasons[0]!r}"
        else:
            extra = f"subscribers={len(self._callbacks)}"

        return f"<{cls_repr} object at {id(self):#x} [{extra}]>"

    def __bool__(self, /) -> bool:
        """
        Returns :data:`True` if the signal has been triggered.
        """

        return bool(self._reasons)

    @property
    def triggered(self, /) -> bool:
        return bool(self._reasons)

    @property
    def reason(self, /) -> Any:
        if self._reasons:
            return self._reasons[0]

        return None

    def subscribe(
        self,
        callback: Callable[[], object],
        /,
    ) -> Callable[[], None]:
        """
        Register *callback* to be called when the signal fires.

        Subscribing to a triggered signal never calls *callback*; check
        :attr:`triggered` first.
        """

        token = object()

        self._callbacks[token] = callback

        def unsubscribe() -> None:
            self._callbacks.pop(token, None)

        return unsubscribe

    def _trigger(self, /, reason: object) -> bool:
        if self._reasons:
            return False

        self._reasons.append(reason)

        callbacks = list(self._callbacks.values())
        self._callbacks.clear()

        for callback in callbacks:
            try:
                callback()
            except Exception:
                LOGGER.exception(
                    "exception calling abort callback %r for %r",
                    callback,
                    self,
                )

        return True


class AbortController:
    """
    Owns an :class:`AbortSignal` and triggers it.

    Example:
        >>> controller = AbortController()
        >>> controller.abort('shutting down')
        True
        >>> controller.abort('again')  # only the first call has an effect
        False
        >>> controller.signal.reason
        'shutting down'
    """

    __slots__ = (
        "__weakref__",
        "_signal",
    )

    def __init__(self, /) -> None:
        self._signal = AbortSignal()

    def __repr__(self, /) -> str:
        cls = self.__class__
        cls_repr = f"{cls.__module__}.{cls.__qualname__}"

        if self._signal:
            extra = "aborted"
        else:
            extra = "active"

        return f"<{cls_repr} object at {id(self):#x} [{extra}]>"

    @property
    def signal(self, /) -> AbortSignal:
        """
        The signal to pass as ``cancellation``.
        """

        return self._signal

    def abort(self, /, reason: object = None) -> bool:
        """
        Trigger the signal, notifying every current subscriber once.

        Returns :data:`True` on the first call and :data:`False` afterwards.
        Exceptions raised by subscribers are logged and do not stop the others
        from being notified.
        """

        return self._signal._trigger(reason)
