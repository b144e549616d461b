"""
Referral Core - Headless engine for client referral networks.

Turns a flat client list into a leveled referral graph, lays it out,
animates layout changes, handles pointer interaction and derives network
analytics. It has no UI dependencies; the desktop host lives in
referral_app.
"""

__version__ = "0.1.0"

# Lazy imports to avoid loading everything at once
def __getattr__(name):
    if name == "GraphBuilder":
        from .services.graph_builder import GraphBuilder
        return GraphBuilder
    elif name == "LayoutEngine":
        from .services.layout import LayoutEngine
        return LayoutEngine
    elif name == "TransitionAnimator":
        from .services.transition import TransitionAnimator
        return TransitionAnimator
    elif name == "InteractionController":
        from .services.interaction import InteractionController
        return InteractionController
    elif name == "AnalyticsEngine":
        from .services.analytics import AnalyticsEngine
        return AnalyticsEngine
    elif name == "FilterEngine":
        from .services.filters import FilterEngine
        return FilterEngine
    elif name == "EngineSettings":
        from .config import EngineSettings
        return EngineSettings
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

__all__ = [
    "__version__",
    "GraphBuilder",
    "LayoutEngine",
    "TransitionAnimator",
    "InteractionController",
    "AnalyticsEngine",
    "FilterEngine",
    "EngineSettings",
]
