#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: 0BSD

import asyncio

import aiopermits


def test_toggle(checkpoints):
    assert aiopermits.lowlevel.async_checkpoint_enabled()

    aiopermits.lowlevel.disable_checkpoints()

    assert not aiopermits.lowlevel.async_checkpoint_enabled()

    aiopermits.lowlevel.enable_checkpoints()

    assert aiopermits.lowlevel.async_checkpoint_enabled()


def test_enabled(checkpoints):
    async def main():
        order = []

        async def other():
            order.append("other")

        task = asyncio.create_task(other())

        await aiopermits.lowlevel.async_checkpoint()
        order.append("main")

        await task

        assert order == ["other", "main"]

    asyncio.run(main())


def test_disabled(checkpoints):
    aiopermits.lowlevel.disable_checkpoints()

    async def main():
        order = []

        async def other():
            order.append("other")

        task = asyncio.create_task(other())

        await aiopermits.lowlevel.async_checkpoint()
        order.append("main")

        await task

        assert order == ["main", "other"]

    asyncio.run(main())
