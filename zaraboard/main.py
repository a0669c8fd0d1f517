# Rev 0.3.0

# zaraboard/main.py
from __future__ import annotations
import argparse
import sys

from PySide6.QtCore import Qt, QCoreApplication
from PySide6.QtGui import QGuiApplication, QFont
from PySide6.QtWidgets import QApplication

from zaraboard.repositories.db import Database
from zaraboard.repositories.sqlite_document_store import SQLiteDocumentStore
from zaraboard.ui.main_window import MainWindow
from zaraboard.utils.config import load_settings
from zaraboard.utils.logging_setup import get_logger, setup_logging
from zaraboard.utils.paths import ensure_dirs


def _parse_args(argv):
    p = argparse.ArgumentParser(prog="zaraboard", description="Project tracker: tasks, budget and notes.")
    p.add_argument("--db", help="SQLite file to use (default: $ZARABOARD_DB or the XDG data dir)")
    p.add_argument("--debug", action="store_true", help="log at DEBUG level")
    return p.parse_args(argv)


def _build_store(db_path) -> SQLiteDocumentStore:
    db = Database(db_path)
    db.run_migrations()
    return SQLiteDocumentStore(db)


def main(argv=None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)

    ensure_dirs()
    logfile = setup_logging(debug=args.debug)
    log = get_logger("main")

    QGuiApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )
    QCoreApplication.setOrganizationName("zaraboard")
    QCoreApplication.setApplicationName("zaraboard")
    app = QApplication(sys.argv[:1])
    app.setFont(QFont("Sans Serif", 10))

    settings = load_settings()
    store = _build_store(args.db)

    win = MainWindow(store=store, settings=settings, logfile=logfile)
    win.show()
    app.setProperty("mainWindow", win)

    log.info("Started; log file %s", logfile)
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
