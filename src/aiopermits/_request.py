#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import enum
import sys

from logging import Logger, getLogger
from typing import TYPE_CHECKING, Any, Final, NamedTuple, Protocol

from .lowlevel import async_checkpoint

if sys.version_info >= (3, 9):
    from collections.abc import Callable, Generator
else:
    from typing import Callable, Generator

if TYPE_CHECKING:
    from asyncio import Future

LOGGER: Final[Logger] = getLogger(__name__)


class RequestState(enum.Enum):
    PENDING = "pending"
    FULFILLED = "fulfilled"
    REJECTED = "rejected"


class RequestInfo(NamedTuple):
    """
    A snapshot of one queued request.
    """

    requested: int
    granted: int
    remaining: int


class PendingRequest:
    """
    One acquisition of one or more permits, from creation to its terminal
    state.

    The request only ever leaves :attr:`RequestState.PENDING` once. Whatever
    causes the transition, the registered cleanups run exactly once right
    after it, in registration order.
    """

    __slots__ = (
        "__weakref__",
        "_cleanups",
        "_state",
        "future",
        "granted",
        "requested",
    )

    def __init__(self, /, requested: int, future: Future[Any]) -> None:
        self._cleanups = []
        self._state = RequestState.PENDING

        self.future = future
        self.granted = 0
        self.requested = requested

    def __repr__(self, /) -> str:
        cls = self.__class__
        cls_repr = f"{cls.__module__}.{cls.__qualname__}"

        extra = (
            f"{self._state.value}, granted={self.granted}/{self.requested}"
        )

        return f"<{cls_repr} object at {id(self):#x} [{extra}]>"

    @property
    def state(self, /) -> RequestState:
        return self._state

    @property
    def pending(self, /) -> bool:
        return self._state is RequestState.PENDING

    @property
    def remaining(self, /) -> int:
        return self.requested - self.granted

    def info(self, /) -> RequestInfo:
        return RequestInfo(self.requested, self.granted, self.remaining)

    def add_cleanup(self, callback: Callable[[], object], /) -> None:
        """
        Register *callback* to run on the terminal transition. If the request
        has already left the pending state, *callback* runs immediately.
        """

        if self._state is RequestState.PENDING:
            self._cleanups.append(callback)
        else:
            self._call(callback)

    def fulfil(self, /) -> bool:
        if self._state is not RequestState.PENDING:
            return False

        self._state = RequestState.FULFILLED

        if not self.future.done():
            self.future.set_result(self.requested)

        self._finish()

        return True

    def reject(self, exc: BaseException, /) -> bool:
        if self._state is not RequestState.PENDING:
            return False

        self._state = RequestState.REJECTED

        if not self.future.done():
            self.future.set_exception(exc)

        self._finish()

        return True

    def abandon(self, /) -> bool:
        if self._state is not RequestState.PENDING:
            return False

        self._state = RequestState.REJECTED

        self.future.cancel()

        self._finish()

        return True

    def _finish(self, /) -> None:
        cleanups, self._cleanups = self._cleanups, []

        for callback in cleanups:
            self._call(callback)

    def _call(self, callback: Callable[[], object], /) -> None:
        try:
            callback()
        except Exception:
            LOGGER.exception(
                "exception calling cleanup %r for %r",
                callback,
                self,
            )


class _Owner(Protocol):
    def _withdraw(self, request: PendingRequest, /) -> bool: ...
    def _release(self, count: int, /) -> None: ...


class Acquisition:
    """
    A handle to one in-flight acquisition.

    Awaiting it returns the number of permits granted, or raises the reason
    the acquisition failed. The handle does not own the queue: it can only
    observe the request and abandon it.

    If the task awaiting the handle is cancelled, the request is withdrawn
    and every permit reserved or granted to it goes back to the semaphore
    before :exc:`asyncio.CancelledError` propagates.
    """

    __slots__ = (
        "__weakref__",
        "_delivered",
        "_owner",
        "_request",
    )

    def __init__(self, /, owner: _Owner, request: PendingRequest) -> None:
        self._delivered = False
        self._owner = owner
        self._request = request

    def __repr__(self, /) -> str:
        cls = self.__class__
        cls_repr = f"{cls.__module__}.{cls.__qualname__}"

        request = self._request

        extra = (
            f"{request.state.value}, granted={request.granted}"
            f"/{request.requested}"
        )

        return f"<{cls_repr} object at {id(self):#x} [{extra}]>"

    def __await__(self, /) -> Generator[Any, Any, int]:
        future = self._request.future

        if future.done():
            granted = future.result()

            try:
                yield from async_checkpoint().__await__()
            except BaseException:
                self._withdraw()
                raise

            self._delivered = True

            return granted

        try:
            granted = yield from future.__await__()
        except BaseException:
            self._withdraw()
            raise

        self._delivered = True

        return granted

    def _withdraw(self, /) -> None:
        request = self._request

        if request.pending:
            self._owner._withdraw(request)
        elif request.state is RequestState.FULFILLED and not self._delivered:
            # the permits were granted but nobody received them
            self._delivered = True
            self._owner._release(request.requested)

    def cancel(self, /) -> bool:
        """
        Abandon the acquisition if it is still pending.

        Permits already reserved for it are returned to the semaphore.
        Returns :data:`False` if the acquisition has already been fulfilled or
        rejected; fulfilled permits must then be released as usual.
        """

        if not self._request.pending:
            return False

        return self._owner._withdraw(self._request)

    def done(self, /) -> bool:
        """
        Return :data:`True` if the acquisition reached a terminal state.
        """

        return not self._request.pending

    def cancelled(self, /) -> bool:
        """
        Return :data:`True` if the acquisition was abandoned, either via
        :meth:`cancel` or by cancelling the awaiting task.
        """

        return self._request.future.cancelled()

    @property
    def requested(self, /) -> int:
        """
        The number of permits asked for.
        """

        return self._request.requested

    @property
    def granted(self, /) -> int:
        """
        The number of permits currently reserved for or held by the
        acquisition. Drops back to zero if it is rejected.
        """

        return self._request.granted
