#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: 0BSD

import asyncio

import pytest

import aiopermits


def test_current_async_library():
    async def main():
        lib1 = aiopermits.lowlevel.current_async_library()
        lib2 = aiopermits.lowlevel.current_async_library(failsafe=False)
        lib3 = aiopermits.lowlevel.current_async_library(failsafe=True)

        assert lib1 == lib2 == lib3 == "asyncio"

    asyncio.run(main())


def test_current_async_library_failsafe():
    with pytest.raises(aiopermits.lowlevel.AsyncLibraryNotFoundError):
        aiopermits.lowlevel.current_async_library()
    with pytest.raises(aiopermits.lowlevel.AsyncLibraryNotFoundError):
        aiopermits.lowlevel.current_async_library(failsafe=False)

    assert aiopermits.lowlevel.current_async_library(failsafe=True) is None


def test_ensure_supported_library():
    from aiopermits.lowlevel._libraries import ensure_supported_library

    with pytest.raises(RuntimeError, match="no running event loop"):
        ensure_supported_library()

    async def main():
        assert ensure_supported_library() == "asyncio"

    asyncio.run(main())


def test_create_future():
    with pytest.raises(RuntimeError):
        aiopermits.lowlevel.create_future()

    async def main():
        future = aiopermits.lowlevel.create_future()

        assert future.get_loop() is asyncio.get_running_loop()
        assert not future.done()

    asyncio.run(main())


def test_default_timer():
    with pytest.raises(RuntimeError):
        aiopermits.lowlevel.get_default_timer()

    async def main():
        timer = aiopermits.lowlevel.get_default_timer()

        assert timer is asyncio.get_running_loop()

    asyncio.run(main())
