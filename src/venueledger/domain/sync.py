"""Best-effort mirroring of ledger mutations to the persistence adapter.

The in-memory ledger is the source of truth. Each mutation is applied
locally first and then handed to ``RemoteMirror.submit``, which never blocks
and never raises. Inside a running event loop the call is scheduled as a
task right away; without one (the CLI) it is queued until ``drain``.

Failures are logged, reported to the notifier as warnings and kept in
``failures``. Nothing is retried, so a failed call leaves the remote store
behind the local ledger until the entry is written again.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from venueledger.database.base import PersistenceAdapter
from venueledger.domain.entities import Severity
from venueledger.domain.errors import PersistenceError
from venueledger.domain.notifications import Notifier, NullNotifier

logger = logging.getLogger(__name__)

AdapterCall = Callable[[PersistenceAdapter], Awaitable[Any]]


class RemoteMirror:
    """Schedule adapter calls without gating the caller."""

    def __init__(
        self,
        adapter: Optional[PersistenceAdapter] = None,
        notifier: Optional[Notifier] = None,
    ):
        """Initialize the mirror.

        Args:
            adapter: Persistence adapter, or None to mirror nothing
            notifier: Sink for failure warnings
        """
        self.adapter = adapter
        self.notifier = notifier or NullNotifier()
        self.failures: list[PersistenceError] = []
        self._queued: list[tuple[str, AdapterCall]] = []
        self._tasks: set[asyncio.Task] = set()
        self._last_task: Optional[asyncio.Task] = None

    @property
    def pending_count(self) -> int:
        """Number of calls queued or still running."""
        return len(self._queued) + len(self._tasks)

    def submit(self, operation: str, call: AdapterCall) -> None:
        """Mirror one mutation.

        Calls run in submission order. Returns immediately.

        Args:
            operation: Adapter operation name, used in error reports
            call: Coroutine function receiving the adapter
        """
        if self.adapter is None:
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._queued.append((operation, call))
            return

        task = loop.create_task(self._run_after(self._last_task, operation, call))
        self._last_task = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run_after(
        self, previous: Optional[asyncio.Task], operation: str, call: AdapterCall
    ) -> None:
        if previous is not None and not previous.done():
            await asyncio.wait([previous])
        await self._run(operation, call)

    async def _run(self, operation: str, call: AdapterCall) -> None:
        try:
            await call(self.adapter)
        except PersistenceError as e:
            self._report(e)
        except Exception as e:
            self._report(PersistenceError(operation, str(e) or type(e).__name__, e))

    def _report(self, error: PersistenceError) -> None:
        logger.warning("Remote sync failed: %s", error)
        self.failures.append(error)
        self.notifier.notify(f"Sync warning: {error}", Severity.WARNING)

    async def drain(self) -> list[PersistenceError]:
        """Run queued calls and wait for scheduled ones.

        Returns:
            Failures recorded since the previous drain
        """
        queued, self._queued = self._queued, []
        for operation, call in queued:
            await self._run(operation, call)
        if self._tasks:
            await asyncio.gather(*list(self._tasks))
        self._last_task = None

        failures, self.failures = self.failures, []
        return failures

    async def close(self) -> list[PersistenceError]:
        """Drain outstanding calls and release the adapter."""
        failures = await self.drain()
        if self.adapter is not None:
            await self.adapter.close()
        return failures
