from __future__ import annotations

import asyncio
import random


def compute_backoff(
    attempt: int, base_delay: float = 0.05, factor: float = 2.0, jitter: float = 0.05
) -> float:
    """Exponential backoff with jitter for optimistic-concurrency retries."""
    delay = base_delay * factor ** attempt
    return delay + random.uniform(0, jitter)


async def schedule_retry(attempt: int) -> None:
    """Sleep for computed backoff delay before retrying."""
    delay = compute_backoff(attempt)
    await asyncio.sleep(delay)
