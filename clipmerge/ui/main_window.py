"""Main application window (UI layer).

A single pane: the ordered clip list, buttons to edit the order, and a merge
button that hands the list to a MergeWorker thread. Per-source skips are
shown in the status bar and in a dialog when a merge finishes.
"""

from __future__ import annotations

import shutil
import sys
from typing import List, Optional

from PySide6.QtCore import QThread
from PySide6.QtGui import QAction
from PySide6.QtWidgets import (
    QApplication,
    QFileDialog,
    QHBoxLayout,
    QListWidget,
    QMainWindow,
    QMessageBox,
    QProgressBar,
    QPushButton,
    QStatusBar,
    QVBoxLayout,
    QWidget,
)

from .. import config
from ..core.result import RunResult
from ..services.merge import Merger
from ..services.merge_worker import MergeWorker, start_merge_thread

VIDEO_FILTER = "Video Files ({})".format(
    " ".join(f"*.{ext}" for ext in config.ACCEPTED_EXTENSIONS)
)


class MainWindow(QMainWindow):
    def __init__(self, merger: Optional[Merger] = None):
        super().__init__()
        self.setWindowTitle("Clipmerge")
        self.setGeometry(100, 100, 640, 420)
        self._merger = merger
        self._worker: Optional[MergeWorker] = None
        self._thread: Optional[QThread] = None
        self.last_result: Optional[RunResult] = None
        self._createMenuBar()
        self._createLayout()

    def _createMenuBar(self):
        menu_bar = self.menuBar()
        file_menu = menu_bar.addMenu("File")
        add_action = QAction("Add Clips", self)
        add_action.triggered.connect(self._addClipsDialog)
        file_menu.addAction(add_action)
        exit_action = QAction("Exit", self)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)
        about_menu = menu_bar.addMenu("About")
        about_action = QAction("About Clipmerge", self)
        about_action.triggered.connect(self._showAboutDialog)
        about_menu.addAction(about_action)

    def _showAboutDialog(self):
        QMessageBox.about(
            self,
            "About Clipmerge",
            "Clipmerge\nJoin clips recorded by the same camera into one video.",
        )

    def _createLayout(self):
        central_widget = QWidget()
        root_layout = QVBoxLayout()

        self.clip_list = QListWidget()
        self.clip_list.setSelectionMode(QListWidget.SingleSelection)
        root_layout.addWidget(self.clip_list, stretch=1)

        buttons = QHBoxLayout()
        self.add_btn = QPushButton("Add…")
        self.remove_btn = QPushButton("Remove")
        self.up_btn = QPushButton("Up")
        self.down_btn = QPushButton("Down")
        self.merge_btn = QPushButton("Merge")
        self.cancel_btn = QPushButton("Cancel")
        self.cancel_btn.setEnabled(False)
        for btn in (
            self.add_btn,
            self.remove_btn,
            self.up_btn,
            self.down_btn,
            self.merge_btn,
            self.cancel_btn,
        ):
            buttons.addWidget(btn)
        root_layout.addLayout(buttons)

        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, 100)
        root_layout.addWidget(self.progress_bar)

        central_widget.setLayout(root_layout)
        self.setCentralWidget(central_widget)
        self.setStatusBar(QStatusBar())

        self.add_btn.clicked.connect(self._addClipsDialog)
        self.remove_btn.clicked.connect(self.removeSelected)
        self.up_btn.clicked.connect(lambda: self.moveSelected(-1))
        self.down_btn.clicked.connect(lambda: self.moveSelected(1))
        self.merge_btn.clicked.connect(self.startMerge)
        self.cancel_btn.clicked.connect(self.cancelMerge)

    # --- Clip list editing ---
    def _addClipsDialog(self):
        paths, _ = QFileDialog.getOpenFileNames(self, "Add Clips", "", VIDEO_FILTER)
        self.addClips(paths)

    def addClips(self, paths: List[str]):
        for path in paths:
            if path:
                self.clip_list.addItem(path)

    def clipPaths(self) -> List[str]:
        return [self.clip_list.item(i).text() for i in range(self.clip_list.count())]

    def removeSelected(self):
        row = self.clip_list.currentRow()
        if row >= 0:
            self.clip_list.takeItem(row)

    def moveSelected(self, delta: int):
        row = self.clip_list.currentRow()
        target = row + delta
        if row < 0 or not (0 <= target < self.clip_list.count()):
            return
        item = self.clip_list.takeItem(row)
        self.clip_list.insertItem(target, item)
        self.clip_list.setCurrentRow(target)

    # --- Merge ---
    def startMerge(self):
        if self._worker is not None:
            return
        self.last_result = None
        self.progress_bar.setValue(0)
        self._setBusy(True)
        self.statusBar().showMessage("Merging…")
        self._worker = MergeWorker(self.clipPaths(), self._merger)
        self._worker.progress.connect(self._onProgress)
        self._worker.finished.connect(self._onFinished)
        self._worker.cancelled.connect(self._onCancelled)
        self._worker.failed.connect(self._onFailed)
        self._thread = start_merge_thread(self._worker, self)
        self._thread.finished.connect(self._onThreadDone)

    def cancelMerge(self):
        if self._worker is not None:
            self._worker.cancel()
            self.statusBar().showMessage("Cancelling…")

    def isMerging(self) -> bool:
        return self._worker is not None

    def _setBusy(self, busy: bool):
        for btn in (self.add_btn, self.remove_btn, self.up_btn, self.down_btn, self.merge_btn):
            btn.setEnabled(not busy)
        self.cancel_btn.setEnabled(busy)

    def _onProgress(self, fraction: float):
        self.progress_bar.setValue(int(fraction * 100))

    def _onFinished(self, result: RunResult):
        self.last_result = result
        skipped = [r for r in result.reports if not r.ok]
        if result.ok:
            message = f"Merged into {result.output}"
            if skipped:
                message += f" ({len(skipped)} source(s) skipped)"
            self.progress_bar.setValue(100)
        else:
            message = f"Merge failed: {result.error}"
        self.statusBar().showMessage(message)
        if skipped and self.isVisible():
            QMessageBox.warning(self, "Clipmerge", result.summary())

    def _onCancelled(self):
        self.progress_bar.setValue(0)
        self.statusBar().showMessage("Merge cancelled")

    def _onFailed(self, message: str):
        self.statusBar().showMessage(message)
        if self.isVisible():
            QMessageBox.critical(self, "Error", message)

    def _onThreadDone(self):
        self._worker = None
        if self._thread is not None:
            self._thread.deleteLater()
        self._thread = None
        self._setBusy(False)

    def _ensureFFmpeg(self):
        """Check ffmpeg availability; MoviePy relies on it for decoding."""
        if shutil.which("ffmpeg") is None:
            QMessageBox.warning(
                self,
                "FFmpeg Missing",
                "FFmpeg not found in PATH. Please install ffmpeg to enable merging.",
            )


def run():  # convenience launcher
    app = QApplication(sys.argv)
    window = MainWindow()
    window._ensureFFmpeg()
    window.show()
    sys.exit(app.exec())


__all__ = ["MainWindow", "run"]
