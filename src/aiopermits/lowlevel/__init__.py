#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

"""
This package implements the building blocks the semaphore sits on: async
library detection, futures, timers and checkpoints.

You can use its contents to plug the primitives into your own scheduling, for
example by passing a custom timer.
"""

from ._checkpoints import (
    async_checkpoint as async_checkpoint,
    async_checkpoint_enabled as async_checkpoint_enabled,
    disable_checkpoints as disable_checkpoints,
    enable_checkpoints as enable_checkpoints,
)
from ._futures import (
    create_future as create_future,
)
from ._libraries import (
    AsyncLibraryNotFoundError as AsyncLibraryNotFoundError,
    current_async_library as current_async_library,
)
from ._timers import (
    Timer as Timer,
    TimerHandle as TimerHandle,
    get_default_timer as get_default_timer,
)
