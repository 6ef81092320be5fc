"""
Change pipeline: filesystem polling, debouncing and per-subscriber sessions.
"""

from specboard.core.watch.debounce import DebounceTimer
from specboard.core.watch.poller import Fingerprint, PollingWatcher
from specboard.core.watch.session import WatchSession

__all__ = [
    "DebounceTimer",
    "Fingerprint",
    "PollingWatcher",
    "WatchSession",
]
