"""Bounded, failure-isolating runner for per-location collection work.

Each item is handled by an injected async worker. At most ``limit`` workers
are in flight at once, an optional timeout abandons a slow item, and a
failure for one item is logged and recorded without cancelling the others.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Generic, Iterable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_CONCURRENCY = 3


@dataclass
class CollectReport(Generic[T]):
    succeeded: list[tuple[T, Any]] = field(default_factory=list)
    failed: list[tuple[T, BaseException]] = field(default_factory=list)
    timed_out: list[T] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed) + len(self.timed_out)

    @property
    def ok(self) -> bool:
        return not self.failed and not self.timed_out


async def collect_each(
    items: Iterable[T],
    worker: Callable[[T], Awaitable[Any]],
    *,
    limit: int = DEFAULT_CONCURRENCY,
    timeout: float | None = None,
    label: Callable[[T], str] = str,
) -> CollectReport[T]:
    if limit < 1:
        raise ValueError("limit must be at least 1")
    pending = list(items)
    report: CollectReport[T] = CollectReport()
    semaphore = asyncio.Semaphore(limit)
    total = len(pending)

    async def _run(index: int, item: T) -> None:
        async with semaphore:
            logger.info("STARTING - %d/%d %s", index + 1, total, label(item))
            try:
                result = await asyncio.wait_for(worker(item), timeout)
            except asyncio.TimeoutError:
                logger.warning("Timed out after %ss: %s", timeout, label(item))
                report.timed_out.append(item)
            except Exception as exc:
                logger.error("Failed %s: %s", label(item), exc, exc_info=logger.isEnabledFor(logging.DEBUG))
                report.failed.append((item, exc))
            else:
                report.succeeded.append((item, result))

    await asyncio.gather(*(_run(i, item) for i, item in enumerate(pending)))
    logger.info(
        "Collected %d/%d (%d failed, %d timed out)",
        len(report.succeeded),
        total,
        len(report.failed),
        len(report.timed_out),
    )
    return report


def run_collect(
    items: Iterable[T],
    worker: Callable[[T], Awaitable[Any]],
    *,
    limit: int = DEFAULT_CONCURRENCY,
    timeout: float | None = None,
    label: Callable[[T], str] = str,
) -> CollectReport[T]:
    """Synchronous entry point for ``collect_each``."""
    return asyncio.run(
        collect_each(items, worker, limit=limit, timeout=timeout, label=label)
    )
