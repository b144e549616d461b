"""
Base ViewModel class for the referral network app.

ViewModels hold state and commands and notify the views through PyQt6
signals. They never reference widgets.
"""

import logging
from typing import Any, Optional

from PyQt6.QtCore import QObject, pyqtSignal

logger = logging.getLogger(__name__)


class BaseViewModel(QObject):
    """
    Base class for all ViewModels.

    Pattern:
    - Properties with signals on change
    - Commands as methods
    - No widget references (UI-agnostic)
    - Engines injected via constructor

    Signals:
        error_occurred: Emitted with a user-facing message when a command fails
    """

    error_occurred = pyqtSignal(str)

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)

    def _set_and_notify(self, target: Any, name: str, value: Any, signal: pyqtSignal) -> bool:
        """
        Set target.name and emit signal, only when the value changes.

        Returns:
            True if the value changed
        """
        if getattr(target, name) == value:
            return False
        setattr(target, name, value)
        signal.emit()
        return True

    def _report_error(self, message: str) -> None:
        logger.error(message)
        self.error_occurred.emit(message)
