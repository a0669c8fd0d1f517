# Rev 0.2.0

# ui/window_mode.py
from PySide6.QtCore import QRect, QSize
from PySide6.QtGui import QGuiApplication


def _available(win) -> QRect:
    screen = QGuiApplication.screenAt(win.frameGeometry().center()) or QGuiApplication.primaryScreen()
    return screen.availableGeometry()


def restore_geometry(win, *, width: int, height: int, maximized: bool = False) -> None:
    """Size the main window from saved settings, clamped to the current screen."""
    rect = _available(win)
    win.resize(QSize(min(width, rect.width()), min(height, rect.height())))
    if maximized:
        win.showMaximized()


def size_dialog(win, *, width_ratio=0.45, height_ratio=0.6, min_width=420, min_height=360):
    """
    Modal dialogs: a fraction of the current screen, never smaller than the
    minimums, still resizable.
    """
    rect = _available(win)
    w = max(min_width, int(rect.width() * width_ratio))
    h = max(min_height, int(rect.height() * height_ratio))
    win.resize(min(w, rect.width()), min(h, rect.height()))
