from __future__ import annotations

import logging
import sys
from pathlib import Path

from PySide6.QtGui import QColor, QFont, QPalette
from PySide6.QtWidgets import QApplication, QMessageBox, QStyleFactory

from taskclock.config import SETTINGS
from taskclock.domain.errors import StorageError
from taskclock.infra.logging import setup_logging
from taskclock.infra.store import TaskStore
from taskclock.services.notifier import TimerNotifier
from taskclock.services.session import TaskSession
from taskclock.ui.main_window import MainWindow

logger = logging.getLogger(__name__)


def _apply_dark_palette(app: QApplication) -> None:
    palette = QPalette()
    palette.setColor(QPalette.Window, QColor("#1E1E1E"))
    palette.setColor(QPalette.WindowText, QColor("#E6EDF3"))
    palette.setColor(QPalette.Base, QColor("#282828"))
    palette.setColor(QPalette.AlternateBase, QColor("#303030"))
    palette.setColor(QPalette.Text, QColor("#E6EDF3"))
    palette.setColor(QPalette.Button, QColor("#303030"))
    palette.setColor(QPalette.ButtonText, QColor("#E6EDF3"))
    palette.setColor(QPalette.Highlight, QColor("#4682B4"))
    palette.setColor(QPalette.HighlightedText, QColor("#FFFFFF"))
    app.setPalette(palette)


def load_styles(app: QApplication) -> None:
    qss_path = Path(__file__).resolve().parent / "ui" / "styles.qss"
    if qss_path.exists():
        app.setStyleSheet(qss_path.read_text(encoding="utf-8"))


def main() -> None:
    setup_logging(SETTINGS)
    app = QApplication(sys.argv)

    db_path = SETTINGS.resolved_database_path()
    try:
        store = TaskStore.open(
            db_path,
            strict_decode=SETTINGS.strict_row_decode,
            seed=SETTINGS.seed_examples,
        )
    except StorageError as exc:
        logger.critical("Cannot open task store at %s: %s", db_path, exc)
        QMessageBox.critical(None, "DB error", str(exc))
        sys.exit(1)

    notifier = TimerNotifier() if SETTINGS.timer_notify else None
    session = TaskSession(store, observers=[notifier] if notifier else [])

    app.setStyle(QStyleFactory.create("Fusion"))
    _apply_dark_palette(app)
    app.setFont(QFont(app.font().family(), 11))
    load_styles(app)

    window = MainWindow(session)
    window.show()
    code = app.exec()

    if notifier:
        notifier.close()
    store.close()
    sys.exit(code)


if __name__ == "__main__":
    main()
