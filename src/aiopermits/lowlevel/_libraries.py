#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from typing import Literal

from sniffio import (
    AsyncLibraryNotFoundError as AsyncLibraryNotFoundError,
    current_async_library as _sniffio_current_async_library,
)

if sys.version_info >= (3, 11):
    from typing import overload
else:
    from typing_extensions import overload

SUPPORTED_ASYNC_LIBRARIES: frozenset[str] = frozenset({"asyncio"})


@overload
def current_async_library(*, failsafe: Literal[False] = False) -> str: ...
@overload
def current_async_library(*, failsafe: Literal[True]) -> str | None: ...
def current_async_library(*, failsafe=False):
    """
    Return the name of the async library running in the current context, as
    reported by :mod:`sniffio`.

    With *failsafe* set, :data:`None` is returned instead of raising
    :exc:`AsyncLibraryNotFoundError` when no library is detected.
    """

    try:
        return _sniffio_current_async_library()
    except AsyncLibraryNotFoundError:
        if failsafe:
            return None

        raise


def ensure_supported_library() -> str:
    """
    Return the running async library, raising :exc:`RuntimeError` if it is
    missing or not one the primitives can schedule on.
    """

    library = current_async_library(failsafe=True)

    if library is None:
        msg = "no running event loop, or not in async context"
        raise RuntimeError(msg)

    if library not in SUPPORTED_ASYNC_LIBRARIES:
        msg = f"unsupported async library {library!r}"
        raise RuntimeError(msg)

    return library
