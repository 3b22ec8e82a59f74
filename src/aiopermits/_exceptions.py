#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations


class InvalidArgument(ValueError):
    """
    A malformed argument was passed to a constructor or an operation.

    Raised synchronously, before any state is touched.
    """


class OverRelease(RuntimeError):
    """
    More permits were released than are currently held.

    This is a programming error; the semaphore does not try to correct its
    accounting.
    """


class AcquireError(Exception):
    """
    Base class of the reasons an acquisition may end without permits.
    """


class Aborted(AcquireError):
    """
    The cancellation signal of the acquisition was triggered.
    """

    def __init__(self, /, reason: object = None) -> None:
        self.reason = reason

        if reason is None:
            super().__init__("acquisition aborted")
        else:
            super().__init__(f"acquisition aborted: {reason!r}")


class TimedOut(AcquireError, TimeoutError):
    """
    The acquisition was not granted within its timeout.
    """

    def __init__(self, /, timeout: float) -> None:
        self.timeout = timeout

        super().__init__(f"acquisition timed out after {timeout!r} seconds")


class Cleared(AcquireError):
    """
    The queue was cleared while the acquisition was waiting.
    """

    def __init__(self, /) -> None:
        super().__init__("acquisition cleared from the queue")


class TooLargeForResize(AcquireError):
    """
    The semaphore was shrunk below the number of permits requested.
    """

    def __init__(self, /, requested: int, size: int) -> None:
        self.requested = requested
        self.size = size

        super().__init__(
            f"{requested} permits requested but the semaphore was resized"
            f" to {size}"
        )
