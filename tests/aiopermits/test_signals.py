#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: 0BSD

import logging

import aiopermits


def test_abort():
    controller = aiopermits.AbortController()
    signal = controller.signal

    assert isinstance(signal, aiopermits.AbortSignal)
    assert not signal
    assert not signal.triggered
    assert signal.reason is None
    assert repr(controller).endswith("[active]>")

    assert controller.abort("first")
    assert not controller.abort("second")

    assert signal
    assert signal.triggered
    assert signal.reason == "first"
    assert repr(controller).endswith("[aborted]>")


def test_subscribe():
    controller = aiopermits.AbortController()
    calls = []

    controller.signal.subscribe(lambda: calls.append("a"))
    unsubscribe = controller.signal.subscribe(lambda: calls.append("b"))
    controller.signal.subscribe(lambda: calls.append("c"))

    unsubscribe()
    unsubscribe()

    controller.abort()
    controller.abort()

    assert calls == ["a", "c"]


def test_subscribe_after_abort():
    controller = aiopermits.AbortController()
    controller.abort()

    calls = []

    controller.signal.subscribe(lambda: calls.append(1))()

    assert calls == []


def test_failing_subscriber(caplog):
    controller = aiopermits.AbortController()
    calls = []

    def fail():
        raise ZeroDivisionError

    controller.signal.subscribe(fail)
    controller.signal.subscribe(lambda: calls.append(1))

    with caplog.at_level(logging.ERROR, logger="aiopermits"):
        assert controller.abort()

    assert calls == [1]
    assert any(
        record.exc_info is not None
        and record.exc_info[0] is ZeroDivisionError
        for record in caplog.records
    )


def test_protocol():
    class Signal:
        triggered = False
        reason = None

        def subscribe(self, callback, /):
            return lambda: None

    assert isinstance(Signal(), aiopermits.CancellationSignal)
    assert isinstance(
        aiopermits.AbortController().signal,
        aiopermits.CancellationSignal,
    )
    assert not isinstance(object(), aiopermits.CancellationSignal)
    assert not isinstance(
        aiopermits.AbortController(),
        aiopermits.CancellationSignal,
    )
