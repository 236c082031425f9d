"""Deadline and race primitives the probes are composed from."""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

logger = logging.getLogger(__name__)


class TimedOut:
    """Sentinel returned by with_deadline when the deadline wins."""

    def __repr__(self):
        return 'TIMED_OUT'

    def __bool__(self):
        return False


TIMED_OUT = TimedOut()


async def with_deadline(awaitable: Awaitable, seconds: Optional[float]):
    """Await ``awaitable``, returning TIMED_OUT instead of raising if ``seconds`` elapse first."""
    try:
        return await asyncio.wait_for(awaitable, seconds)
    except asyncio.TimeoutError:
        return TIMED_OUT


@dataclass
class RaceResult:
    winner: Optional[str] = None
    outcome: Any = None
    settled: Dict[str, Any] = field(default_factory=dict)


def _is_ok(outcome) -> bool:
    return bool(getattr(outcome, 'ok', False))


def _discard(task: asyncio.Task):
    # retrieve whatever a cancelled loser ended with so asyncio never reports it as unhandled
    if not task.cancelled() and task.exception() is not None:
        logger.debug(f"Abandoned race branch ended with {task.exception()!r}")


def _settle(task: asyncio.Task):
    if task.cancelled():
        return asyncio.CancelledError()
    exc = task.exception()
    return exc if exc is not None else task.result()


async def first_success(branches: Mapping[str, Awaitable], window: Optional[float] = None,
                        is_success: Callable[[Any], bool] = _is_ok) -> RaceResult:
    """Run ``branches`` concurrently and return the first one that succeeds.

    A success that settles inside ``window`` (or at any time when ``window``
    is None) wins straight away and the other branches are cancelled. If the
    window closes first, every branch is awaited and the earliest branch in
    mapping order that succeeded wins. Branches that raise never win; their
    exception is reported in ``settled``.
    """
    loop = asyncio.get_running_loop()
    tasks = {name: asyncio.ensure_future(aw) for name, aw in branches.items()}
    order = list(tasks)
    settled = {}
    deadline = None if window is None else loop.time() + window
    pending = set(tasks.values())
    try:
        while pending:
            timeout = None if deadline is None else max(0.0, deadline - loop.time())
            done, pending = await asyncio.wait(pending, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
            if not done:
                logger.debug(f"Race window of {window}s closed without a winner, waiting for {len(pending)} branch(es)")
                break
            # iterate in priority order so simultaneous settles keep the tie-break
            for name in order:
                task = tasks[name]
                if task in done:
                    settled[name] = _settle(task)
                    if is_success(settled[name]):
                        return RaceResult(name, settled[name], settled)
        if pending:
            await asyncio.wait(pending)
        for name in order:
            settled.setdefault(name, _settle(tasks[name]))
        for name in order:
            if is_success(settled[name]):
                return RaceResult(name, settled[name], settled)
        return RaceResult(None, None, settled)
    finally:
        for task in tasks.values():
            if not task.done():
                task.cancel()
                task.add_done_callback(_discard)
