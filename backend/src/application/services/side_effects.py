"""
Best-effort side effects

Secondary actions (counters, e-mails, notifications) must never fail the
primary mutation that triggered them.
"""
from contextlib import AbstractAsyncContextManager
from typing import Awaitable, Callable, Optional

from loguru import logger


SavepointFactory = Callable[[], AbstractAsyncContextManager]


async def best_effort(
    operation: str,
    action: Callable[[], Awaitable],
    savepoint: Optional[SavepointFactory] = None,
) -> bool:
    """
    Run action, logging and swallowing any failure.

    When a savepoint factory is given the action runs inside it, so a failed
    database write rolls back alone and the outer transaction stays usable.
    """
    try:
        if savepoint is None:
            await action()
        else:
            async with savepoint():
                await action()
        return True
    except Exception as e:
        logger.error(f"Side effect '{operation}' failed: {e}")
        return False
