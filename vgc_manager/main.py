"""
Application entry point.

Responsibilities:
  1. Load settings and configure logging.
  2. Build the engine, check the connection, create missing tables.
  3. Create the controller and main window; run the Qt event loop.

Configuration and connection errors are fatal: logged, shown in a message
box and reported with exit code 1. The engine is disposed on every exit path.
"""

import logging
import sys

from PyQt6.QtWidgets import QApplication, QMessageBox

from vgc_manager.config.settings import load_settings
from vgc_manager.core.collection_controller import CollectionController
from vgc_manager.core.exceptions import CollectionError
from vgc_manager.core.validation_engine import ValidationEngine
from vgc_manager.data.database import (
    check_connection,
    create_db_engine,
    init_db,
    make_session_factory,
)
from vgc_manager.gui.main_window import MainWindow

logger = logging.getLogger("vgc.main")

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def main() -> int:
    app = QApplication(sys.argv)
    engine = None
    try:
        settings = load_settings()
        logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
        app.setApplicationName(settings.app_name)
        app.setApplicationVersion(settings.app_version)

        engine = create_db_engine(settings)
        check_connection(engine)
        if settings.create_schema:
            init_db(engine)

        controller = CollectionController(
            make_session_factory(engine),
            ValidationEngine(lenient=settings.lenient_parsing),
        )
        window = MainWindow(controller, settings)
        window.show()
        return app.exec()
    except CollectionError as exc:
        if not logging.getLogger().handlers:
            logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        logger.critical("Startup failed: %s", exc)
        QMessageBox.critical(None, "Video Game Collection", f"Startup failed:\n\n{exc}")
        return 1
    finally:
        if engine is not None:
            engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
