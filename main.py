"""
Main entry point for the Text Compare application.

Parses the command line, configures logging, installs the uncaught
exception hook and opens the main window.
"""

from __future__ import annotations

import argparse
import faulthandler
import logging
import os
import signal
import sys
import traceback
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, List

from PyQt6.QtCore import QTimer
from PyQt6.QtWidgets import QApplication, QMessageBox

from textcompare import __version__
from textcompare.core.exceptions import TextCompareError
from textcompare.services.settings import SettingsManager, Theme, get_config_dir


# =============================================================================
# Constants
# =============================================================================

APP_NAME = "TextCompare"
APP_DISPLAY_NAME = "Text Compare"
APP_VERSION = __version__
APP_ORGANIZATION = "TextCompare"

LOGS_DIR = get_config_dir() / "logs"
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

# Libraries that are chatty below WARNING
QUIET_LOGGERS = ('chardet',)


@dataclass
class CommandLineArgs:
    """Parsed command line arguments."""
    left_path: Optional[str] = None
    right_path: Optional[str] = None
    theme: Optional[Theme] = None
    log_level: str = "INFO"
    reset_settings: bool = False
    debug: bool = False

    @property
    def log_file(self) -> Optional[Path]:
        """Debug runs also log to a dated file."""
        if not self.debug:
            return None
        return LOGS_DIR / f"{APP_NAME}_{datetime.now():%Y%m%d}.log"


# =============================================================================
# Logging
# =============================================================================

class LogFormatter(logging.Formatter):
    """Pipe-separated log lines; the level name is colored on terminals."""

    LEVEL_COLORS = {
        logging.DEBUG: '\033[36m',
        logging.INFO: '\033[32m',
        logging.WARNING: '\033[33m',
        logging.ERROR: '\033[31m',
        logging.CRITICAL: '\033[1;31m',
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True):
        super().__init__(
            fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        self.use_colors = use_colors and sys.stdout is not None and sys.stdout.isatty()

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        color = self.LEVEL_COLORS.get(record.levelno) if self.use_colors else None
        if not color:
            return line

        level = f"{record.levelname:<8}"
        return line.replace(f"| {level} |", f"| {color}{level}{self.RESET} |", 1)


def _add_handler(
    logger: logging.Logger,
    handler: logging.Handler,
    level: int,
    use_colors: bool
) -> None:
    handler.setLevel(level)
    handler.setFormatter(LogFormatter(use_colors=use_colors))
    logger.addHandler(handler)


def setup_logging(level: str = "INFO", log_file: Optional[Path] = None) -> logging.Logger:
    """
    Configure the root logger.

    Args:
        level: Log level name
        log_file: Also write to this file when given

    Returns:
        Root logger instance
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    _add_handler(root_logger, logging.StreamHandler(sys.stdout), numeric_level, use_colors=True)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        _add_handler(
            root_logger,
            logging.FileHandler(log_file, encoding='utf-8'),
            numeric_level,
            use_colors=False,
        )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger


# =============================================================================
# Uncaught Exceptions
# =============================================================================

class ExceptionHandler:
    """
    sys.excepthook replacement.

    Every uncaught exception is logged. Once the window is up, application
    errors are shown as a warning and anything else as a critical message
    with the traceback in the details pane.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self.show_dialogs = False

    def __call__(self, exc_type: type, exc_value: BaseException, exc_tb) -> None:
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_tb)
            return

        self.logger.critical("Unhandled exception", exc_info=(exc_type, exc_value, exc_tb))

        if self.show_dialogs and QApplication.instance() is not None:
            self._report(exc_type, exc_value, exc_tb)

    def _report(self, exc_type: type, exc_value: BaseException, exc_tb) -> None:
        if isinstance(exc_value, TextCompareError):
            QMessageBox.warning(None, APP_DISPLAY_NAME, str(exc_value))
            return

        dialog = QMessageBox(
            QMessageBox.Icon.Critical,
            "Unexpected Error",
            f"{exc_type.__name__}: {exc_value}",
        )
        dialog.setInformativeText("The error has been logged. Your texts are saved as you type.")
        dialog.setDetailedText(''.join(traceback.format_exception(exc_type, exc_value, exc_tb)))
        dialog.exec()


# =============================================================================
# Command Line
# =============================================================================

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Side-by-side word comparison of two texts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s                     Reopen the last texts\n"
            "  %(prog)s old.txt new.txt     Compare two files\n"
            "  %(prog)s --theme dark        Start with the dark theme\n"
        )
    )

    parser.add_argument('left', nargs='?', help='File to load into the left pane')
    parser.add_argument('right', nargs='?', help='File to load into the right pane')

    parser.add_argument(
        '--theme',
        choices=[theme.value for theme in Theme],
        help='Theme for this run (also saved to settings)'
    )
    parser.add_argument(
        '--reset-settings',
        action='store_true',
        help='Restore default settings before starting'
    )

    logging_group = parser.add_argument_group('logging')
    logging_group.add_argument('-v', '--verbose', action='store_true', help='Same as --log-level DEBUG')
    logging_group.add_argument(
        '--debug',
        action='store_true',
        help='Log at DEBUG and also write a log file to ' + str(LOGS_DIR)
    )
    logging_group.add_argument('--log-level', choices=LOG_LEVELS, default='INFO')

    parser.add_argument('--version', action='version', version=f'{APP_NAME} {APP_VERSION}')
    return parser


def parse_arguments(args: Optional[List[str]] = None) -> CommandLineArgs:
    """
    Parse command line arguments.

    Args:
        args: Arguments to parse (defaults to sys.argv)
    """
    parsed = _build_parser().parse_args(args)

    return CommandLineArgs(
        left_path=parsed.left,
        right_path=parsed.right,
        theme=Theme.from_string(parsed.theme) if parsed.theme else None,
        log_level='DEBUG' if parsed.debug or parsed.verbose else parsed.log_level,
        reset_settings=parsed.reset_settings,
        debug=parsed.debug,
    )


# =============================================================================
# Application Setup
# =============================================================================

def setup_application() -> QApplication:
    """Create the QApplication and set its identity."""
    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setApplicationDisplayName(APP_DISPLAY_NAME)
    app.setApplicationVersion(APP_VERSION)
    app.setOrganizationName(APP_ORGANIZATION)
    return app


def setup_settings(args: CommandLineArgs) -> SettingsManager:
    """Load settings and apply command line overrides."""
    manager = SettingsManager()

    if args.reset_settings:
        logging.info("Resetting settings to defaults")
        manager.reset()

    if args.theme is not None:
        manager.settings.ui.theme = args.theme

    return manager


def create_main_window(args: CommandLineArgs, settings_manager: SettingsManager):
    """
    Create the main window and load any files named on the command line.

    Without file arguments the window shows the texts saved last session.
    """
    from textcompare.core.models import Side
    from textcompare.ui.main_window import MainWindow

    window = MainWindow(settings_manager)

    if args.left_path and args.right_path:
        window.compare_files(args.left_path, args.right_path)
    elif args.left_path:
        window.open_file(Side.LEFT, args.left_path)

    return window


# =============================================================================
# Signals
# =============================================================================

def setup_signal_handlers() -> Optional[QTimer]:
    """Quit cleanly on SIGINT/SIGTERM; not available on Windows."""
    if sys.platform == 'win32':
        return None

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    # Python signal handlers only run when the interpreter gets control back
    timer = QTimer()
    timer.timeout.connect(lambda: None)
    timer.start(500)
    return timer


def _signal_handler(signum, frame) -> None:
    logging.info(f"Received signal {signum}, shutting down...")
    QApplication.quit()


# =============================================================================
# Main
# =============================================================================

def main() -> int:
    """Application entry point; returns the process exit code."""
    # Frozen builds without a console have no standard streams
    if sys.stdout is None:
        sys.stdout = open(os.devnull, 'w')
    if sys.stderr is None:
        sys.stderr = open(os.devnull, 'w')

    faulthandler.enable()

    args = parse_arguments()
    logger = setup_logging(args.log_level, args.log_file)
    logger.info(f"Starting {APP_NAME} v{APP_VERSION}")

    excepthook = ExceptionHandler(logger)
    sys.excepthook = excepthook

    from textcompare.ui.theme import apply_theme

    try:
        app = setup_application()
        settings_manager = setup_settings(args)
        settings = settings_manager.settings
        apply_theme(app, settings.ui.theme, settings.colors)

        signal_timer = setup_signal_handlers()
        window = create_main_window(args, settings_manager)
        window.show()
        excepthook.show_dialogs = True

        exit_code = app.exec()
    except Exception as e:
        logger.critical(f"Fatal error during startup: {e}", exc_info=True)
        if QApplication.instance():
            QMessageBox.critical(
                None,
                "Fatal Error",
                f"{APP_DISPLAY_NAME} failed to start:\n\n{e}\n\nSee the log for details."
            )
        return 1

    if signal_timer is not None:
        signal_timer.stop()

    logger.info(f"Exiting with code {exit_code}")
    return exit_code


if __name__ == '__main__':
    sys.exit(main())
