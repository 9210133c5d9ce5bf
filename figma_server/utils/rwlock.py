"""Reader/writer lock for asyncio tasks.

Many readers may hold the lock at once; a writer holds it alone. Once a writer
is waiting, new readers queue behind it so registrations are not starved by a
steady stream of reads.

Releasing never awaits: the counters are updated in place and waiters are woken
from a separate task, so a holder cancelled during release cannot leave the
lock marked as held.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class AsyncRWLock:
    def __init__(self) -> None:
        self._cond = asyncio.Condition()
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0
        self._wakers: set[asyncio.Task[None]] = set()

    def _wake_waiters(self) -> None:
        task = asyncio.get_running_loop().create_task(self._notify_all())
        self._wakers.add(task)
        task.add_done_callback(self._wakers.discard)

    async def _notify_all(self) -> None:
        async with self._cond:
            self._cond.notify_all()

    @asynccontextmanager
    async def read(self) -> AsyncIterator[None]:
        async with self._cond:
            await self._cond.wait_for(lambda: not self._writer and self._waiting_writers == 0)
            self._readers += 1
        try:
            yield
        finally:
            self._readers -= 1
            if self._readers == 0:
                self._wake_waiters()

    @asynccontextmanager
    async def write(self) -> AsyncIterator[None]:
        async with self._cond:
            self._waiting_writers += 1
            try:
                await self._cond.wait_for(lambda: not self._writer and self._readers == 0)
            except BaseException:
                # Readers may be parked behind this writer; let them re-check.
                self._waiting_writers -= 1
                self._cond.notify_all()
                raise
            self._waiting_writers -= 1
            self._writer = True
        try:
            yield
        finally:
            self._writer = False
            self._wake_waiters()
