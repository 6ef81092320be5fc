"""
Per-subscriber change pipeline.

A WatchSession owns everything one subscriber needs:

    PollingWatcher --changes--> DebounceTimer --fires--> re-scan --> queue

- start() scans once, emits the snapshot, then starts polling
- Bursts of changes inside the debounce window collapse into one re-scan
- Re-scans hold a lock, so they never overlap and emit in firing order
- A failing re-scan is logged and counted; the session stays open
- close() releases the timer and poll task and ends events()

Usage:
    session = WatchSession(project_root, ProjectScanner())
    await session.start()
    async for event in session.events():
        send(event)
    ...
    session.close()
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Iterable
from pathlib import Path

from specboard.core.speckit.models import UpdateEvent
from specboard.core.speckit.scanner import ProjectScanner
from specboard.core.watch.debounce import DebounceTimer
from specboard.core.watch.poller import PollingWatcher

logger = logging.getLogger(__name__)


class WatchSession:
    """
    Watch one project root on behalf of one subscriber.

    Example:
        >>> async with WatchSession(Path("./my-app"), debounce=0.3) as session:
        ...     async for event in session.events():
        ...         print(len(event.data.features))
    """

    def __init__(
        self,
        root: Path,
        scanner: ProjectScanner | None = None,
        debounce: float = 0.3,
        poll_interval: float | None = None,
        depth: int = 3,
        ignore_hidden: bool = True,
    ):
        """
        Initialize the watch session.

        Args:
            root: Project root to watch
            scanner: Scanner used for every snapshot (defaults to ProjectScanner())
            debounce: Quiet period in seconds before a re-scan
            poll_interval: Seconds between filesystem polls (defaults to debounce)
            depth: Maximum watched directory depth below root
            ignore_hidden: Ignore dot-files and dot-directories
        """
        self.root = Path(root)
        self.scanner = scanner or ProjectScanner()
        self.watcher = PollingWatcher(
            self.root,
            interval=poll_interval if poll_interval is not None else debounce,
            depth=depth,
            ignore_hidden=ignore_hidden,
        )
        self.timer = DebounceTimer(debounce, self._on_debounce)

        self.scan_count = 0
        self.failed_cycles = 0

        self._queue: asyncio.Queue[UpdateEvent | None] = asyncio.Queue()
        self._lock = asyncio.Lock()
        self._cycles: set[asyncio.Task[None]] = set()
        self._poll_task: asyncio.Task[None] | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def start(self) -> None:
        """Emit the initial snapshot, then begin polling for changes."""
        if self._closed:
            raise RuntimeError("WatchSession is closed")
        await asyncio.to_thread(self.watcher.poll)
        await self._cycle()
        if not self._closed:
            self._poll_task = asyncio.create_task(self._poll_loop())
        logger.debug(f"Watching {self.root}")

    def notify_change(self, paths: Iterable[Path] = ()) -> None:
        """Record a change and (re)arm the debounce timer."""
        if self._closed:
            return
        logger.debug(f"Change under {self.root}: {[str(p) for p in paths]}")
        self.timer.reset()

    def _on_debounce(self) -> None:
        if self._closed:
            return
        task = asyncio.create_task(self._cycle())
        self._cycles.add(task)
        task.add_done_callback(self._cycles.discard)

    async def _cycle(self) -> None:
        async with self._lock:
            if self._closed:
                return
            try:
                project = await self.scanner.scan_async(self.root)
            except Exception:
                self.failed_cycles += 1
                logger.exception(f"Re-scan of {self.root} failed")
                return

            if self._closed or project is None:
                return
            self.scan_count += 1
            self._queue.put_nowait(UpdateEvent(type="update", data=project))

    async def _poll_loop(self) -> None:
        async for changed in self.watcher.watch():
            self.notify_change(changed)

    async def next_event(self, timeout: float | None = None) -> UpdateEvent | None:
        """
        Wait for the next update event.

        Args:
            timeout: Seconds to wait (None waits forever)

        Returns:
            The next event, or None once the session is closed

        Raises:
            TimeoutError: If no event arrived within ``timeout``
        """
        event = await asyncio.wait_for(self._queue.get(), timeout=timeout)
        if event is None:
            # Leave the sentinel for any later reader
            self._queue.put_nowait(None)
        return event

    async def events(self) -> AsyncIterator[UpdateEvent]:
        """Yield update events until the session is closed."""
        while (event := await self.next_event()) is not None:
            yield event

    def close(self) -> None:
        """
        Stop the timer and the poll task and end events().

        A re-scan already running finishes, but its result is discarded.
        """
        if self._closed:
            return
        self._closed = True
        self.timer.cancel()
        if self._poll_task is not None:
            self._poll_task.cancel()
            self._poll_task = None
        self._queue.put_nowait(None)
        logger.debug(f"Closed watch session for {self.root}")

    async def __aenter__(self) -> "WatchSession":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()
