#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

from math import isinf, isnan
from numbers import Real
from typing import NamedTuple, Optional

from ._exceptions import InvalidArgument
from ._signals import CancellationSignal


class AcquireOptions(NamedTuple):
    """
    Validated parameters of one acquisition.

    Instances are produced by :func:`normalize_options`; every operation that
    acquires builds exactly one of them at its boundary.
    """

    count: int = 1
    cancellation: Optional[CancellationSignal] = None
    timeout: Optional[float] = None


def check_count(count: object, size: int, /, *, name: str = "count") -> int:
    if isinstance(count, bool) or not isinstance(count, int):
        msg = f"{name} must be an integer, got {count!r}"
        raise InvalidArgument(msg)

    if count < 1:
        msg = f"{name} must be >= 1"
        raise InvalidArgument(msg)

    if count > size:
        msg = f"{name} must be <= {size} (the semaphore size), got {count!r}"
        raise InvalidArgument(msg)

    return count


def check_size(size: object, /) -> int:
    if isinstance(size, bool) or not isinstance(size, int):
        msg = f"size must be an integer, got {size!r}"
        raise InvalidArgument(msg)

    if size < 1:
        msg = "size must be >= 1"
        raise InvalidArgument(msg)

    return size


def check_timeout(timeout: object, /) -> float | None:
    if timeout is None:
        return None

    if isinstance(timeout, bool) or not isinstance(timeout, Real):
        msg = f"timeout must be a real number or None, got {timeout!r}"
        raise InvalidArgument(msg)

    timeout = float(timeout)

    if isnan(timeout):
        msg = "timeout must be non-NaN"
        raise InvalidArgument(msg)

    if timeout <= 0:
        msg = "timeout must be > 0"
        raise InvalidArgument(msg)

    if isinf(timeout):
        return None

    return timeout


def check_cancellation(cancellation: object, /) -> CancellationSignal | None:
    if cancellation is None:
        return None

    if not isinstance(cancellation, CancellationSignal):
        msg = (
            "cancellation must provide 'triggered', 'reason' and"
            f" 'subscribe()', got {cancellation!r}"
        )
        raise InvalidArgument(msg)

    return cancellation


def normalize_options(
    size: int,
    /,
    count: object = 1,
    cancellation: object = None,
    timeout: object = None,
) -> AcquireOptions:
    """
    Validate the arguments of an acquiring call against a semaphore of *size*
    permits.

    Raises:
      InvalidArgument:
        if any argument is malformed.
    """

    return AcquireOptions(
        check_count(count, size),
        check_cancellation(cancellation),
        check_timeout(timeout),
    )
