"""Qt worker running a merge off the GUI thread.

Mirrors the thread-worker pattern used for media generation: the worker is a
QObject moved onto a QThread, ``run`` executes there and results come back as
signals. The merge itself is a coroutine, so ``run`` drives its own asyncio
event loop; ``cancel`` may be called from any thread.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import List, Optional

from PySide6.QtCore import QObject, QThread, Signal

from .merge import Merger

logger = logging.getLogger(__name__)


class MergeWorker(QObject):
    started = Signal()
    progress = Signal(float)  # export fraction 0.0 - 1.0
    finished = Signal(object)  # RunResult
    cancelled = Signal()
    failed = Signal(str)  # unexpected errors only; merge failures arrive via finished

    def __init__(self, sources: List[str], merger: Optional[Merger] = None):
        super().__init__()
        self._sources = list(sources)
        self._merger = merger or Merger()
        self._lock = threading.Lock()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._task: Optional[asyncio.Task] = None
        self._cancel_requested = False

    def run(self):  # executed in thread
        self.started.emit()
        try:
            result = asyncio.run(self._main())
        except asyncio.CancelledError:
            logger.info("merge cancelled")
            self.cancelled.emit()
            return
        except Exception as e:
            logger.exception("merge crashed")
            self.failed.emit(f"merge error: {e}")
            return
        self.finished.emit(result)

    async def _main(self):
        with self._lock:
            if self._cancel_requested:
                raise asyncio.CancelledError()
            self._loop = asyncio.get_running_loop()
            self._task = asyncio.current_task()
        try:
            return await self._merger.run(self._sources, self.progress.emit)
        finally:
            with self._lock:
                self._loop = None
                self._task = None

    def cancel(self):
        with self._lock:
            self._cancel_requested = True
            if self._loop is not None and self._task is not None:
                self._loop.call_soon_threadsafe(self._task.cancel)


def start_merge_thread(worker: MergeWorker, parent: Optional[QObject] = None) -> QThread:
    """Move ``worker`` to a new QThread, wire cleanup and start it."""
    thread = QThread(parent)
    worker.moveToThread(thread)
    thread.started.connect(worker.run)
    for signal in (worker.finished, worker.cancelled, worker.failed):
        signal.connect(thread.quit)
    thread.start()
    return thread


__all__ = ["MergeWorker", "start_merge_thread"]
