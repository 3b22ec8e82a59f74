#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import asyncio
import os

from typing import Final

_ASYNCIO_CHECKPOINTS_ENABLED_BY_DEFAULT: Final[bool] = bool(
    os.getenv(
        "AIOPERMITS_ASYNCIO_CHECKPOINTS",
        os.getenv(
            "AIOPERMITS_ASYNC_CHECKPOINTS",
            "",
        ),
    )
)

_async_checkpoints_enabled: bool = _ASYNCIO_CHECKPOINTS_ENABLED_BY_DEFAULT


def enable_checkpoints() -> None:
    """
    Make immediately granted acquisitions yield to the event loop once.
    """

    global _async_checkpoints_enabled

    _async_checkpoints_enabled = True


def disable_checkpoints() -> None:
    """
    Let immediately granted acquisitions return without yielding.
    """

    global _async_checkpoints_enabled

    _async_checkpoints_enabled = False


def async_checkpoint_enabled() -> bool:
    """
    Return :data:`True` if async checkpoints are currently enabled.

    The initial value comes from the ``AIOPERMITS_ASYNCIO_CHECKPOINTS``
    environment variable, or ``AIOPERMITS_ASYNC_CHECKPOINTS`` if the former is
    unset. Any non-empty value enables them.
    """

    return _async_checkpoints_enabled


async def async_checkpoint() -> None:
    """
    Yield to the event loop if checkpoints are enabled, otherwise do nothing.
    """

    if _async_checkpoints_enabled:
        await asyncio.sleep(0)
