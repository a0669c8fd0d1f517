# Rev 0.3.0

# zaraboard – logging setup (Rev 0.3.0)
from __future__ import annotations
import logging, os, sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from PySide6.QtCore import qInstallMessageHandler, QtMsgType

from .paths import APP_NAME, logs_dir

FMT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATEFMT = "%Y-%m-%d %H:%M:%S"

_QT_LEVELS = {
    QtMsgType.QtDebugMsg: logging.DEBUG,
    QtMsgType.QtInfoMsg: logging.INFO,
    QtMsgType.QtWarningMsg: logging.WARNING,
    QtMsgType.QtCriticalMsg: logging.ERROR,
    QtMsgType.QtFatalMsg: logging.CRITICAL,
}

# handlers installed by setup_logging(), replaced on every call
_installed: list[logging.Handler] = []


def _qt_handler(msg_type, context, message):
    logging.getLogger(f"{APP_NAME}.qt").log(_QT_LEVELS.get(msg_type, logging.INFO), message)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{APP_NAME}.{name}")


def log_file() -> Path:
    return logs_dir() / f"{APP_NAME}.log"


def _resolve_level(debug: bool) -> tuple[str, int]:
    # --debug wins over ZARABOARD_LOG_LEVEL (DEBUG/INFO/WARNING/ERROR), default INFO
    name = "DEBUG" if debug else os.environ.get("ZARABOARD_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, name, None)
    if not isinstance(level, int):
        return "INFO", logging.INFO
    return name, level


def setup_logging(*, debug: bool = False) -> Path:
    level_name, level = _resolve_level(debug)
    logfile = log_file()
    logfile.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    for h in _installed:
        root.removeHandler(h)
        h.close()
    _installed.clear()
    root.setLevel(level)

    formatter = logging.Formatter(FMT, DATEFMT)
    # file rotates at 5MB, 7 backups kept; console mirrors it
    for handler in (
        RotatingFileHandler(logfile, maxBytes=5_000_000, backupCount=7, encoding="utf-8"),
        logging.StreamHandler(sys.stdout),
    ):
        handler.setFormatter(formatter)
        handler.setLevel(level)
        root.addHandler(handler)
        _installed.append(handler)

    def _excepthook(exctype, value, tb):
        logging.getLogger(f"{APP_NAME}.unhandled").error("Uncaught exception", exc_info=(exctype, value, tb))
        sys.__excepthook__(exctype, value, tb)
    sys.excepthook = _excepthook

    qInstallMessageHandler(_qt_handler)

    get_logger("logging").info("Logging initialized at %s; file: %s", level_name, logfile)
    return logfile
