import asyncio
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class OneShot(Generic[T]):
    """
    A result cell that can be written at most once.

    Both timer callbacks and DOM event callbacks write to the same cell;
    whichever fires first wins and every later write is ignored.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        loop = loop or asyncio.get_running_loop()
        self._future: "asyncio.Future[T]" = loop.create_future()

    @property
    def settled(self) -> bool:
        return self._future.done()

    def set_result(self, value: T) -> bool:
        """Returns False if the cell was already settled"""
        if self._future.done():
            return False
        self._future.set_result(value)
        return True

    def set_exception(self, exc: BaseException) -> bool:
        """Returns False if the cell was already settled"""
        if self._future.done():
            return False
        self._future.set_exception(exc)
        return True

    async def wait(self) -> T:
        return await self._future

    def __repr__(self) -> str:
        state = "settled" if self.settled else "pending"
        return f"<OneShot {state}>"
