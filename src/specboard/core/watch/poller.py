"""
Filesystem polling for spec-kit projects.

Walks the project tree at a configured interval and reports which files
were added, modified or removed since the previous poll. Each file is
fingerprinted by (mtime_ns, size, md5) so that a rewrite with identical
content inside the same mtime tick is still seen as unchanged, and a
same-size edit is still seen as changed.
"""

import asyncio
import hashlib
import logging
from collections.abc import AsyncIterator
from pathlib import Path
from typing import NamedTuple

logger = logging.getLogger(__name__)

# Files larger than this are fingerprinted by mtime and size only
HASH_LIMIT_BYTES = 1024 * 1024


class Fingerprint(NamedTuple):
    mtime_ns: int
    size: int
    digest: str | None


class PollingWatcher:
    """
    Poll a directory tree and detect changed files.

    The first poll records a baseline and reports nothing. Later polls
    return the sorted paths that differ from the previous snapshot.

    Example:
        >>> watcher = PollingWatcher(Path("./my-app"), interval=0.3)
        >>> watcher.poll()   # baseline
        []
        >>> # ... edit specs/001-auth/tasks.md ...
        >>> watcher.poll()
        [PosixPath('my-app/specs/001-auth/tasks.md')]
    """

    def __init__(
        self,
        root: Path,
        interval: float = 0.3,
        depth: int = 3,
        ignore_hidden: bool = True,
    ):
        """
        Initialize the polling watcher.

        Args:
            root: Directory to watch
            interval: Seconds between polls in watch()
            depth: Maximum directory depth below root (root entries are depth 0)
            ignore_hidden: Skip files and directories whose name starts with "."
        """
        self.root = Path(root)
        self.interval = interval
        self.depth = depth
        self.ignore_hidden = ignore_hidden
        self._snapshot: dict[Path, Fingerprint] | None = None

    @property
    def has_baseline(self) -> bool:
        return self._snapshot is not None

    def _fingerprint(self, path: Path) -> Fingerprint | None:
        try:
            stat = path.stat()
            digest = None
            if stat.st_size <= HASH_LIMIT_BYTES:
                digest = hashlib.md5(path.read_bytes()).hexdigest()
            return Fingerprint(stat.st_mtime_ns, stat.st_size, digest)
        except OSError:
            # Vanished between listing and stat
            return None

    def _walk(self, directory: Path, level: int, snapshot: dict[Path, Fingerprint]) -> None:
        try:
            entries = list(directory.iterdir())
        except OSError as e:
            logger.debug(f"Cannot list {directory}: {e}")
            return

        for entry in entries:
            if self.ignore_hidden and entry.name.startswith("."):
                continue
            try:
                is_dir = entry.is_dir()
            except OSError:
                continue
            if is_dir:
                if level < self.depth:
                    self._walk(entry, level + 1, snapshot)
            else:
                fingerprint = self._fingerprint(entry)
                if fingerprint is not None:
                    snapshot[entry] = fingerprint

    def snapshot(self) -> dict[Path, Fingerprint]:
        """Fingerprint every watched file under root."""
        snapshot: dict[Path, Fingerprint] = {}
        self._walk(self.root, 0, snapshot)
        return snapshot

    def poll(self) -> list[Path]:
        """
        Take a new snapshot and diff it against the previous one.

        Returns:
            Sorted list of added, modified and removed paths (empty on the
            first call)
        """
        current = self.snapshot()
        previous = self._snapshot
        self._snapshot = current
        if previous is None:
            return []

        changed = {path for path, fp in current.items() if previous.get(path) != fp}
        changed.update(path for path in previous if path not in current)
        return sorted(changed)

    async def watch(self) -> AsyncIterator[list[Path]]:
        """
        Yield non-empty change batches until cancelled.

        Snapshots run in a worker thread so the event loop stays responsive.
        """
        if not self.has_baseline:
            await asyncio.to_thread(self.poll)
        while True:
            await asyncio.sleep(self.interval)
            changed = await asyncio.to_thread(self.poll)
            if changed:
                logger.debug(f"Detected {len(changed)} changed file(s) under {self.root}")
                yield changed
