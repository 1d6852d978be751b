"""Tool availability checks for command categories.

Each category may declare a shell command (``docker --version``) whose exit
code decides whether the category's tool is installed. Results are cached
with a longer TTL for successes than failures, so a freshly installed tool
shows up quickly. Concurrent callers asking for the same check share one
subprocess.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from quickcmd.config.schema import DependencyCheck
from quickcmd.core.config import Settings

logger = logging.getLogger(__name__)


@dataclass
class _PendingCheck:
    task: asyncio.Task
    waiters: int = 0


class DependencyChecker:
    def __init__(
        self,
        settings: Settings,
        checks: dict[str, DependencyCheck],
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._settings = settings
        self._checks = dict(checks)
        self._clock = clock
        # (category_id, command) -> (available, expires_at)
        self._cache: dict[tuple[str, str], tuple[bool, float]] = {}
        self._pending: dict[tuple[str, str], _PendingCheck] = {}

    def set_checks(self, checks: dict[str, DependencyCheck]) -> None:
        self._checks = dict(checks)
        self._cache.clear()

    async def is_available(self, category_id: str) -> bool:
        """True when no enabled check is configured or the check exits 0."""
        check = self._checks.get(category_id)
        if check is None or not check.enabled:
            return True

        key = (category_id, check.command)
        cached = self._cache.get(key)
        now = self._clock()
        if cached is not None and cached[1] > now:
            return cached[0]

        pending = self._pending.get(key)
        if pending is None:
            pending = _PendingCheck(asyncio.create_task(self._check_and_cache(key, category_id, check)))
            self._pending[key] = pending
            pending.task.add_done_callback(lambda _task: self._forget_pending(key, pending))

        pending.waiters += 1
        try:
            return await asyncio.shield(pending.task)
        except asyncio.CancelledError:
            # the last caller to give up stops the subprocess
            if pending.waiters == 1:
                pending.task.cancel()
                await asyncio.gather(pending.task, return_exceptions=True)
            raise
        finally:
            pending.waiters -= 1

    async def check_many(self, category_ids: Iterable[str]) -> dict[str, bool]:
        """Check several categories at once, bounded by the batch timeout.

        Checks still running at the deadline are cancelled and reported as
        unavailable.
        """
        unique_ids = list(dict.fromkeys(category_ids))
        if not unique_ids:
            return {}

        tasks = {cat: asyncio.create_task(self.is_available(cat)) for cat in unique_ids}
        done, pending = await asyncio.wait(
            tasks.values(), timeout=self._settings.dependency_batch_timeout
        )
        for task in pending:
            task.cancel()
        if pending:
            logger.warning("Dependency batch timed out with %d checks pending", len(pending))
            await asyncio.gather(*pending, return_exceptions=True)

        results: dict[str, bool] = {}
        for cat, task in tasks.items():
            if task in done and task.exception() is None:
                results[cat] = task.result()
            else:
                results[cat] = False
        return results

    async def _check_and_cache(self, key: tuple[str, str], category_id: str, check: DependencyCheck) -> bool:
        available = await self._run_check(category_id, check)
        ttl = self._settings.dependency_cache_ttl if available else self._settings.dependency_failure_ttl
        self._cache[key] = (available, self._clock() + ttl)
        return available

    def _forget_pending(self, key: tuple[str, str], pending: _PendingCheck) -> None:
        if self._pending.get(key) is pending:
            del self._pending[key]

    def clear_cache(self) -> None:
        self._cache.clear()

    def clear_category_cache(self, category_id: str) -> None:
        for key in [k for k in self._cache if k[0] == category_id]:
            del self._cache[key]

    async def _run_check(self, category_id: str, check: DependencyCheck) -> bool:
        timeout = check.timeout or self._settings.dependency_check_timeout
        try:
            proc = await asyncio.create_subprocess_shell(
                check.command,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as exc:
            logger.warning("Dependency check for %s could not start: %s", category_id, exc)
            return False

        returncode: Optional[int] = None
        try:
            returncode = await asyncio.wait_for(proc.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("Dependency check for %s timed out after %ss", category_id, timeout)
            return False
        finally:
            if returncode is None and proc.returncode is None:
                try:
                    proc.kill()
                except ProcessLookupError:
                    pass
                await proc.wait()

        logger.debug("Dependency check %r for %s exited %d", check.command, category_id, returncode)
        return returncode == 0
