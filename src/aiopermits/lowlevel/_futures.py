#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import asyncio

from typing import Any

from ._libraries import ensure_supported_library


def create_future() -> asyncio.Future[Any]:
    """
    Create a future bound to the running event loop.

    Raises:
      RuntimeError:
        if there is no running event loop or the running async library is not
        supported.
    """

    library = ensure_supported_library()

    if library == "asyncio":
        return asyncio.get_running_loop().create_future()

    msg = f"unsupported async library {library!r}"
    raise RuntimeError(msg)
