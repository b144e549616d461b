"""
ViewModels for the referral network app.

MVVM architecture separating state from UI:
- ViewModels handle state and commands
- Views (Qt widgets) handle painting and user input
- referral_core services do the graph work
"""

from .base import BaseViewModel
from .network_vm import NetworkVM

__all__ = [
    "BaseViewModel",
    "NetworkVM",
]
