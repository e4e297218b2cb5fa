from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

Confirm = Callable[[str], Awaitable[bool]]

YES_ANSWERS = {"s", "si", "sí", "y", "yes"}


async def console_confirm(message: str) -> bool:
    """Ask on stdin without blocking the event loop."""
    answer = await asyncio.to_thread(input, f"{message} [s/N]: ")
    return answer.strip().lower() in YES_ANSWERS


def static_confirm(answer: bool) -> Confirm:
    async def _confirm(message: str) -> bool:
        return answer

    return _confirm
