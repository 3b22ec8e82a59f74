#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: 0BSD

import heapq

from itertools import count

import pytest

import aiopermits


class ManualHandle:
    __slots__ = (
        "callback",
        "cancelled",
        "when",
    )

    def __init__(self, when, callback):
        self.callback = callback
        self.cancelled = False
        self.when = when

    def cancel(self):
        self.cancelled = True


class ManualTimer:
    """A timer that only moves when the test advances it."""

    def __init__(self):
        self.now = 0.0
        self.handles = []

        self._heap = []
        self._counter = count()

    def call_later(self, delay, callback, /):
        handle = ManualHandle(self.now + delay, callback)

        self.handles.append(handle)

        heapq.heappush(self._heap, (handle.when, next(self._counter), handle))

        return handle

    def advance(self, seconds):
        self.now += seconds

        while self._heap and self._heap[0][0] <= self.now:
            _, _, handle = heapq.heappop(self._heap)

            if not handle.cancelled:
                handle.callback()

    @property
    def scheduled(self):
        return [handle for _, _, handle in self._heap if not handle.cancelled]


class CountingSignal:
    """A cancellation signal that records how it is used."""

    def __init__(self):
        self.triggered = False
        self.reason = None
        self.subscriptions = 0
        self.unsubscriptions = 0

        self._callbacks = []

    def subscribe(self, callback, /):
        self.subscriptions += 1
        self._callbacks.append(callback)

        def unsubscribe():
            self.unsubscriptions += 1

        return unsubscribe

    def fire(self, reason=None):
        # notifies on every call, unlike AbortController
        self.triggered = True
        self.reason = reason

        for callback in list(self._callbacks):
            callback()


@pytest.fixture
def timer():
    return ManualTimer()


@pytest.fixture
def counting_signal():
    return CountingSignal()


@pytest.fixture
def checkpoints():
    enabled = aiopermits.lowlevel.async_checkpoint_enabled()

    aiopermits.lowlevel.enable_checkpoints()

    try:
        yield
    finally:
        if enabled:
            aiopermits.lowlevel.enable_checkpoints()
        else:
            aiopermits.lowlevel.disable_checkpoints()
