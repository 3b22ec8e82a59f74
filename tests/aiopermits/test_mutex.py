#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: 0BSD

import asyncio
import copy
import pickle

import pytest

import aiopermits


class TestMutex:
    factory = aiopermits.Mutex

    def test_base(self, /):
        mutex = self.factory()

        assert mutex.size == 1
        assert mutex.available == 1
        assert mutex.waiting == 0
        assert mutex.queued == ()
        assert not mutex.locked()

        assert repr(mutex).startswith("<aiopermits.Mutex() at ")
        assert repr(mutex).endswith("[unlocked]>")

    def test_attrs(self, /):
        mutex = self.factory()

        with pytest.raises(AttributeError):
            mutex.size = 2
        with pytest.raises(AttributeError):
            mutex.nonexistent_attribute = 42

        assert mutex.size == 1

    def test_count(self, /):
        mutex = self.factory()

        with pytest.raises(aiopermits.InvalidArgument):
            mutex.acquire(2)
        with pytest.raises(aiopermits.InvalidArgument):
            mutex.release(2)

    def test_copy(self, /):
        mutex = self.factory()

        assert isinstance(copy.copy(mutex), self.factory)
        assert isinstance(pickle.loads(pickle.dumps(mutex)), self.factory)

    def test_acquire_and_release(self, /):
        async def main():
            mutex = self.factory()

            assert await mutex.acquire() == 1
            assert mutex.locked()

            acquisition = mutex.wait()

            assert not acquisition.done()
            assert mutex.waiting == 1
            assert repr(mutex).endswith("[locked, waiting=1]>")

            mutex.signal()

            assert await acquisition == 1

            mutex.release()

            assert not mutex.locked()

            with pytest.raises(aiopermits.OverRelease):
                mutex.release()

        asyncio.run(main())

    def test_mutual_exclusion(self, /):
        async def main():
            mutex = self.factory()
            inside = []
            overlaps = 0

            async def worker(i):
                nonlocal overlaps

                async with mutex:
                    if inside:
                        overlaps += 1

                    inside.append(i)
                    await asyncio.sleep(0)
                    inside.remove(i)

            await asyncio.gather(*(worker(i) for i in range(10)))

            assert overlaps == 0
            assert not mutex.locked()

        asyncio.run(main())

    def test_exec(self, /):
        async def main():
            mutex = self.factory()

            async def task():
                assert mutex.locked()
                return 42

            assert await mutex.exec(task) == 42
            assert not mutex.locked()

        asyncio.run(main())

    def test_timeout(self, /, timer):
        async def main():
            mutex = self.factory(timer=timer)
            await mutex.acquire()

            acquisition = mutex.acquire(timeout=1)

            timer.advance(1)

            with pytest.raises(aiopermits.TimedOut):
                await acquisition

            assert mutex.waiting == 0
            assert mutex.locked()

        asyncio.run(main())

    def test_clear_queue(self, /):
        async def main():
            mutex = self.factory()
            await mutex.acquire()

            acquisition = mutex.acquire()

            mutex.clear_queue()

            with pytest.raises(aiopermits.Cleared):
                await acquisition

            assert mutex.locked()

        asyncio.run(main())
