"""
Main entry point for the referral network app.

Usage:
    python -m referral_app [--clients clients.json] [--settings settings.json]
    referral-network  (if installed)
"""

import argparse
import logging
import sys
import traceback
from pathlib import Path
from datetime import datetime

logger = logging.getLogger("referral_app")


def setup_exception_hook(log_file: Path):
    """Record unhandled exceptions (including ones raised in Qt slots) to log_file."""

    def exception_hook(exctype, value, tb):
        if issubclass(exctype, KeyboardInterrupt):
            sys.__excepthook__(exctype, value, tb)
            return

        report = "".join(traceback.format_exception(exctype, value, tb))
        rule = "-" * 60
        with open(log_file, "a", encoding="utf-8") as f:
            f.write(f"\n{rule}\n{datetime.now():%Y-%m-%d %H:%M:%S} {exctype.__name__}: {value}\n{rule}\n")
            f.write(report)

        logger.critical(f"Unhandled {exctype.__name__}: {value} (details in {log_file})")
        sys.__excepthook__(exctype, value, tb)

    sys.excepthook = exception_hook


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="referral-network",
        description="Interactive client referral network viewer",
    )
    parser.add_argument("--clients", type=Path, help="JSON client list to open")
    parser.add_argument("--settings", type=Path, help="JSON file of settings overrides")
    parser.add_argument("--log-file", type=Path, help="Also write logs to this file")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    parser.add_argument(
        "--crash-log", type=Path, default=Path.cwd() / "crash_log.txt",
        help="Where unhandled exceptions are recorded",
    )
    return parser.parse_args(argv)


def main(argv=None):
    """Launch the referral network application."""
    args = parse_args(argv)

    from referral_core.logging_config import setup_logging
    from referral_core.config import load_settings

    setup_logging(
        logging.DEBUG if args.debug else logging.INFO,
        str(args.log_file) if args.log_file else None,
    )
    setup_exception_hook(args.crash_log)

    try:
        settings = load_settings(args.settings)
    except (OSError, ValueError) as e:
        logger.error(f"Could not read settings from {args.settings}: {e}")
        sys.exit(2)

    from PyQt6.QtWidgets import QApplication
    from PyQt6.QtCore import Qt

    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = QApplication(sys.argv[:1])
    app.setStyle("Fusion")
    app.setApplicationName("Referral Network")

    from referral_app.resources.styles import DARK_STYLESHEET
    app.setStyleSheet(DARK_STYLESHEET)

    from referral_app.views.main_window import MainWindow

    window = MainWindow(settings, args.clients)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
