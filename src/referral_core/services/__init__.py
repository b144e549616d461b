"""
Services for the referral network engine.

Graph building, layout, transitions, interaction, analytics and filtering.
"""

from .graph_builder import GraphBuilder, build_graph
from .layout import LayoutEngine, HierarchicalParams, CircularParams
from .transition import TransitionAnimator, ease_out_cubic, interpolate
from .interaction import InteractionController
from .analytics import AnalyticsEngine, heatmap_score, growth_rate
from .filters import FilterEngine, criteria_with_period, summary_text

__all__ = [
    "GraphBuilder",
    "build_graph",
    "LayoutEngine",
    "HierarchicalParams",
    "CircularParams",
    "TransitionAnimator",
    "ease_out_cubic",
    "interpolate",
    "InteractionController",
    "AnalyticsEngine",
    "heatmap_score",
    "growth_rate",
    "FilterEngine",
    "criteria_with_period",
    "summary_text",
]
