import asyncio

from PySide6.QtCore import QCoreApplication, QEventLoop, QTimer

from clipmerge.core.errors import ResolutionEmpty
from clipmerge.core.result import RunResult
from clipmerge.services.merge import Merger
from clipmerge.services.merge_worker import MergeWorker, start_merge_thread

from fakes import FakeOpener, RecordingExporter, StaticPolicy


def _ensure_app():
    return QCoreApplication.instance() or QCoreApplication([])


def _merger(opener=None):
    return Merger(
        StaticPolicy("/out/merged.mp4"),
        RecordingExporter(),
        opener=opener or FakeOpener(),
    )


def test_worker_emits_result_when_run_inline():
    _ensure_app()
    worker = MergeWorker(["a.mp4", "b.mp4"], _merger())
    received = {}
    worker.finished.connect(lambda result: received.setdefault("result", result))
    worker.progress.connect(lambda f: received.setdefault("progress", f))
    worker.run()
    assert isinstance(received["result"], RunResult)
    assert received["result"].ok
    assert received["progress"] == 1.0


def test_merge_failures_arrive_as_results():
    _ensure_app()
    worker = MergeWorker(["only.mp4"], _merger())
    received = []
    worker.finished.connect(received.append)
    worker.run()
    assert isinstance(received[0].error, ResolutionEmpty)


def test_cancel_before_start():
    _ensure_app()
    worker = MergeWorker(["a.mp4", "b.mp4"], _merger())
    events = []
    worker.cancelled.connect(lambda: events.append("cancelled"))
    worker.finished.connect(lambda r: events.append("finished"))
    worker.cancel()
    worker.run()
    assert events == ["cancelled"]


def test_cancel_while_running_in_thread():
    app = _ensure_app()
    opener = FakeOpener()
    opener.register("a.mp4")
    opener.register("b.mp4", gate=asyncio.Event())  # never opens
    worker = MergeWorker(["a.mp4", "b.mp4"], _merger(opener))
    events = []
    worker.cancelled.connect(lambda: events.append("cancelled"))
    worker.finished.connect(lambda r: events.append("finished"))
    thread = start_merge_thread(worker)
    loop = QEventLoop()
    thread.finished.connect(loop.quit)
    QTimer.singleShot(100, worker.cancel)
    QTimer.singleShot(5000, loop.quit)  # safety net
    loop.exec()
    thread.wait(2000)
    app.processEvents()
    assert events == ["cancelled"]
