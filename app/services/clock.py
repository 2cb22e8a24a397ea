from __future__ import annotations

import asyncio
import time
from typing import Protocol


class Clock(Protocol):
    def now_ms(self) -> float:
        ...

    async def sleep_ms(self, milliseconds: float) -> None:
        ...


class SystemClock:
    def now_ms(self) -> float:
        return time.monotonic() * 1000.0

    async def sleep_ms(self, milliseconds: float) -> None:
        await asyncio.sleep(max(float(milliseconds), 0.0) / 1000.0)
