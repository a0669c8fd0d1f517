# Rev 0.3.0 — task update history, newest first
from __future__ import annotations
from typing import Sequence

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QLabel, QScrollArea, QFrame

from zaraboard.models.entities import TaskUpdate
from zaraboard.utils.formatting import format_datetime

_EMPTY_TEXT = "No updates yet. Select a task and use “Add Update” to post one."


class HistoryPanel(QWidget):
    """Read-only feed of a task's updates; the newest entry is badged."""

    def __init__(self, parent=None):
        super().__init__(parent)

        self._heading = QLabel()
        self._heading.setObjectName("UpdatesHeading")
        self._count = QLabel()
        self._count.setProperty("dim", True)

        top = QHBoxLayout()
        top.setContentsMargins(4, 4, 4, 0)
        top.addWidget(self._heading, 1)
        top.addWidget(self._count)

        self._feed = QVBoxLayout()
        self._feed.setContentsMargins(10, 6, 10, 10)
        self._feed.setSpacing(6)
        feed_host = QWidget()
        feed_host.setObjectName("UpdatesFeed")
        feed_host.setLayout(self._feed)

        scroller = QScrollArea()
        scroller.setWidgetResizable(True)
        scroller.setFrameShape(QFrame.NoFrame)
        scroller.setWidget(feed_host)

        outer = QVBoxLayout(self)
        outer.setContentsMargins(0, 0, 0, 0)
        outer.addLayout(top)
        outer.addWidget(scroller, 1)

        self.set_updates([])

    def set_updates(self, updates: Sequence[TaskUpdate], *, title: str = "") -> None:
        self._heading.setText(f"Updates — {title}" if title else "Updates")
        self._count.setText(f"{len(updates)} total" if updates else "")
        self._reset_feed()
        if updates:
            for i, upd in enumerate(updates):
                self._feed.addWidget(self._entry(upd, newest=(i == 0)))
        else:
            hint = QLabel(_EMPTY_TEXT)
            hint.setAlignment(Qt.AlignCenter)
            hint.setWordWrap(True)
            hint.setProperty("dim", True)
            self._feed.addWidget(hint)
        self._feed.addStretch(1)

    def _reset_feed(self) -> None:
        while self._feed.count():
            child = self._feed.takeAt(0).widget()
            if child is not None:
                child.deleteLater()

    @staticmethod
    def _entry(upd: TaskUpdate, *, newest: bool) -> QFrame:
        frame = QFrame()
        frame.setObjectName("UpdateEntry")
        frame.setFrameShape(QFrame.StyledPanel)
        if newest:
            frame.setStyleSheet("QFrame#UpdateEntry { border-left: 3px solid #4a7bd0; }")

        when = QLabel(format_datetime(upd.timestamp) + ("  ·  latest" if newest else ""))
        when.setProperty("dim", True)
        body = QLabel(upd.text)
        body.setWordWrap(True)
        body.setTextInteractionFlags(Qt.TextSelectableByMouse)

        lay = QVBoxLayout(frame)
        lay.setContentsMargins(10, 6, 10, 6)
        lay.setSpacing(4)
        lay.addWidget(when)
        lay.addWidget(body)
        return frame
