"""Bridge from synchronous Flask handlers to the async provider calls."""

import asyncio
from typing import Any


def run_async(coro: Any) -> Any:
    """Run a coroutine to completion on a fresh event loop.

    Flask request handlers are synchronous while ``LLMService.generate_response``
    is a coroutine. The loop is closed afterwards so no state leaks between
    requests. CLI commands use ``asyncio.run`` instead.

    Args:
        coro: The coroutine to execute

    Returns:
        The coroutine's result
    """
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()
