"""
Domain models for the referral network.

Contains DTOs, enums, and data structures used throughout the engine.
"""

from .models import (
    ClientRecord,
    ClientDataError,
    Node,
    Graph,
    Point,
    ViewportState,
    InteractionState,
    AnimationState,
    TopPerformer,
    AnalyticsSnapshot,
    FilterCriteria,
)
from .enums import (
    LayoutMode,
    AnalyticsMode,
    PerformanceBucket,
    PeriodPreset,
)

__all__ = [
    # Models
    "ClientRecord",
    "ClientDataError",
    "Node",
    "Graph",
    "Point",
    "ViewportState",
    "InteractionState",
    "AnimationState",
    "TopPerformer",
    "AnalyticsSnapshot",
    "FilterCriteria",
    # Enums
    "LayoutMode",
    "AnalyticsMode",
    "PerformanceBucket",
    "PeriodPreset",
]
