"""
Enumerations for the referral network domain.
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Optional, Tuple


class LayoutMode(str, Enum):
    """Layout strategies for positioning nodes."""
    HIERARCHICAL = "hierarchical"
    CIRCULAR = "circular"

    def toggled(self) -> "LayoutMode":
        """The other layout mode."""
        if self is LayoutMode.HIERARCHICAL:
            return LayoutMode.CIRCULAR
        return LayoutMode.HIERARCHICAL


class AnalyticsMode(str, Enum):
    """How the analytics panel affects node colouring."""
    METRICS = "metrics"    # Level gradient colours, metrics shown in side panel
    HEATMAP = "heatmap"    # Nodes coloured by performance score


class PerformanceBucket(str, Enum):
    """Buckets of clients by how many referrals they made."""
    HIGH = "high"       # 3+ indications
    MEDIUM = "medium"   # 1-2 indications
    LOW = "low"         # 0 indications

    @classmethod
    def for_count(cls, indication_count: int) -> "PerformanceBucket":
        """Bucket for an indication count."""
        if indication_count >= 3:
            return cls.HIGH
        if indication_count >= 1:
            return cls.MEDIUM
        return cls.LOW


class PeriodPreset(str, Enum):
    """Creation-date presets offered by the filter panel."""
    ALL = "all"
    LAST_7_DAYS = "7days"
    LAST_30_DAYS = "30days"
    LAST_90_DAYS = "90days"
    LAST_YEAR = "1year"

    @property
    def days(self) -> Optional[int]:
        """Window length in days (None = unbounded)."""
        return {
            PeriodPreset.ALL: None,
            PeriodPreset.LAST_7_DAYS: 7,
            PeriodPreset.LAST_30_DAYS: 30,
            PeriodPreset.LAST_90_DAYS: 90,
            PeriodPreset.LAST_YEAR: 365,
        }[self]

    def window(self, now: datetime) -> Optional[Tuple[datetime, datetime]]:
        """Inclusive (start, end) window ending at now, or None for ALL."""
        if self.days is None:
            return None
        return (now - timedelta(days=self.days), now)
