"""
NotchPanel - Main Entry Point

Shows the top-of-screen widget panel driven by the persisted settings.

Flags:
    --debug, -d        Enable debug logging (console + file)
    --verbose, -v      Debug logging plus full before/after setting values
    --reset-settings   Restore default settings before showing the panel
"""
import sys

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QApplication

from core.app_context import create_app_context
from core.logging.logger import get_logger, setup_logging
from utils.monitors import log_screen_configuration
from versioning import APP_NAME, APP_ORGANIZATION, APP_VERSION, parse_version

logger = get_logger(__name__)


def main() -> int:
    """Main entry point for the panel application."""
    debug_mode = '--debug' in sys.argv or '-d' in sys.argv
    verbose_mode = '--verbose' in sys.argv or '-v' in sys.argv
    reset_settings = '--reset-settings' in sys.argv
    setup_logging(debug=debug_mode, verbose=verbose_mode)

    logger.info("=" * 60)
    logger.info("%s %s Starting", APP_NAME, parse_version())
    logger.info("=" * 60)

    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )
    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setOrganizationName(APP_ORGANIZATION)
    app.setApplicationVersion(APP_VERSION)
    # The panel is a tool window; hiding it must not end the process.
    app.setQuitOnLastWindowClosed(False)

    log_screen_configuration()

    exit_code = 0
    context = create_app_context()
    try:
        if reset_settings:
            logger.info("Resetting settings to defaults (--reset-settings)")
            context.settings.reset_to_defaults()
            context.widgets.rebuild_from_persisted()

        if context.settings.get("isFirstLaunch"):
            context.settings.set("isFirstLaunch", False)

        context.surface.show()
        app.aboutToQuit.connect(context.teardown)
        exit_code = app.exec()
    except Exception:
        logger.exception("Fatal error in main")
        exit_code = 1
    finally:
        context.teardown()

    logger.info("=" * 60)
    logger.info("%s Exiting (code=%s)", APP_NAME, exit_code)
    logger.info("=" * 60)
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
