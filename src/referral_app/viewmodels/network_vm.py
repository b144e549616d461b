"""
Network ViewModel for the referral graph view.

Manages:
- Client records and the graph built from them
- Display settings (layout mode, labels, animation, analytics mode)
- Filter criteria and the highlighted node set
- Pan/zoom/selection state (through the InteractionController)
- The analytics snapshot, recomputed on every rebuild

The NetworkCanvas widget reads state from this ViewModel, owns the
animation loop and focuses on painting.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from PyQt6.QtCore import pyqtSignal

from .base import BaseViewModel
from referral_core.config import EngineSettings, clamp_duration
from referral_core.domain.enums import AnalyticsMode, LayoutMode, PerformanceBucket, PeriodPreset
from referral_core.domain.models import (
    AnalyticsSnapshot, ClientRecord, FilterCriteria, Graph, Point,
)
from referral_core.ports.client_port import ClientSourcePort
from referral_core.services.analytics import AnalyticsEngine
from referral_core.services.filters import FilterEngine, criteria_with_period, summary_text
from referral_core.services.graph_builder import GraphBuilder
from referral_core.services.interaction import InteractionController
from referral_core.services.layout import LayoutEngine

logger = logging.getLogger(__name__)

NOT_FOUND = "(not found)"


class NetworkVM(BaseViewModel):
    """
    ViewModel for the referral network.

    Signals:
        graph_changed: Emitted after the graph is rebuilt from new records
        settings_changed: Emitted when display settings change
        highlights_changed: Emitted when the filter highlight set changes
        analytics_changed: Emitted when the analytics snapshot is recomputed
        viewport_changed: Emitted when zoom or pan change
        selection_changed: Emitted with the selected node id (or None)
        hover_changed: Emitted with the hovered node id (or None)
        error_occurred: Emitted with a message when loading fails
    """

    # Signals
    graph_changed = pyqtSignal()
    settings_changed = pyqtSignal()
    highlights_changed = pyqtSignal()
    analytics_changed = pyqtSignal()
    viewport_changed = pyqtSignal()
    selection_changed = pyqtSignal(object)
    hover_changed = pyqtSignal(object)

    def __init__(
        self,
        settings: Optional[EngineSettings] = None,
        now: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the ViewModel.

        Args:
            settings: Engine settings (defaults if None)
            now: Clock for growth windows and period presets (UTC now if None)
        """
        super().__init__()

        self._settings = settings or EngineSettings()
        self._now = now or (lambda: datetime.now(timezone.utc))

        self._builder = GraphBuilder()
        self._layout = LayoutEngine(
            self._settings.hierarchical,
            self._settings.circular,
            fallback_size=(self._settings.canvas_width, self._settings.canvas_height),
        )
        self._analytics_engine = AnalyticsEngine(self._settings.growth_window_days)
        self._filters = FilterEngine()
        self._interaction = InteractionController(
            self._settings.min_zoom, self._settings.max_zoom, self._settings.zoom_step
        )

        # State
        self._records: List[ClientRecord] = []
        self._graph = Graph()
        self._analytics = AnalyticsSnapshot()
        self._criteria = FilterCriteria()
        self._period = PeriodPreset.ALL
        self._highlights: Set[str] = set()
        self._source_description: Optional[str] = None

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def settings(self) -> EngineSettings:
        return self._settings

    @property
    def graph(self) -> Graph:
        return self._graph

    @property
    def analytics(self) -> AnalyticsSnapshot:
        return self._analytics

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    @property
    def period(self) -> PeriodPreset:
        return self._period

    @property
    def highlights(self) -> Set[str]:
        """Ids to highlight (empty when no filter is active)."""
        return self._highlights.copy()

    @property
    def interaction(self) -> InteractionController:
        return self._interaction

    @property
    def selected_id(self) -> Optional[str]:
        return self._interaction.state.selected_id

    @property
    def hovered_id(self) -> Optional[str]:
        return self._interaction.state.hovered_id

    @property
    def source_description(self) -> Optional[str]:
        return self._source_description

    @property
    def filter_summary(self) -> str:
        """'Showing N of M clients' for the filter panel."""
        total = len(self._graph)
        shown = len(self._highlights) if self._criteria.is_active() else total
        return summary_text(shown, total)

    # -------------------------------------------------------------------------
    # Data Loading Commands
    # -------------------------------------------------------------------------

    def load_source(self, source: ClientSourcePort) -> bool:
        """
        Load records from a client source and rebuild.

        Returns:
            True if the records were loaded
        """
        try:
            records = source.load_clients()
        except (OSError, ValueError) as e:
            self._report_error(f"Failed to load clients from {source.description}: {e}")
            return False

        self._source_description = source.description
        self.set_records(records)
        return True

    def set_records(self, records: List[ClientRecord]) -> None:
        """Replace the client list and rebuild graph, analytics and highlights."""
        self._records = list(records)
        self._graph = self._builder.build(self._records)
        logger.info(f"Graph rebuilt: {len(self._graph)} clients, {self._graph.max_level + 1} generations")

        self._analytics = self._analytics_engine.compute(self._graph, self._now())

        before = (self.selected_id, self.hovered_id)
        if self._interaction.forget_missing(self._graph):
            if before[0] != self.selected_id:
                self.selection_changed.emit(None)
            if before[1] != self.hovered_id:
                self.hover_changed.emit(None)

        self.graph_changed.emit()
        self.analytics_changed.emit()
        self._update_highlights(force=True)

    # -------------------------------------------------------------------------
    # Layout
    # -------------------------------------------------------------------------

    def compute_layout(self, width: float, height: float) -> Dict[str, Point]:
        """Target positions for the current graph and layout mode (graph untouched)."""
        return self._layout.compute(self._graph, self._settings.layout_mode, width, height)

    # -------------------------------------------------------------------------
    # Settings Commands
    # -------------------------------------------------------------------------

    def set_layout_mode(self, mode: LayoutMode) -> None:
        self._set_and_notify(self._settings, "layout_mode", LayoutMode(mode), self.settings_changed)

    def toggle_layout_mode(self) -> None:
        self.set_layout_mode(self._settings.layout_mode.toggled())

    def set_show_labels(self, show: bool) -> None:
        self._set_and_notify(self._settings, "show_labels", bool(show), self.settings_changed)

    def set_animation_duration(self, duration_ms: int) -> None:
        self._set_and_notify(
            self._settings, "animation_duration_ms", clamp_duration(duration_ms), self.settings_changed
        )

    def set_analytics_mode(self, mode: AnalyticsMode) -> None:
        self._set_and_notify(self._settings, "analytics_mode", AnalyticsMode(mode), self.settings_changed)

    # -------------------------------------------------------------------------
    # Filter Commands
    # -------------------------------------------------------------------------

    def set_name_filter(self, text: str) -> None:
        self._criteria.name_substring = text.strip() or None
        self._update_highlights()

    def set_period(self, preset: PeriodPreset) -> None:
        self._period = PeriodPreset(preset)
        self._criteria = criteria_with_period(self._criteria, self._period, self._now())
        self._update_highlights()

    def set_ltv_range(self, ltv_range: Optional[Tuple[float, float]]) -> None:
        self._criteria.ltv_range = ltv_range
        self._update_highlights()

    def set_performance_bucket(self, bucket: Optional[PerformanceBucket]) -> None:
        self._criteria.performance_bucket = PerformanceBucket(bucket) if bucket else None
        self._update_highlights()

    def clear_filters(self) -> None:
        self._criteria = FilterCriteria()
        self._period = PeriodPreset.ALL
        self._update_highlights()

    def _update_highlights(self, force: bool = False) -> None:
        highlights = self._filters.highlights(self._graph, self._criteria)
        if force or highlights != self._highlights:
            self._highlights = highlights
            self.highlights_changed.emit()

    # -------------------------------------------------------------------------
    # Viewport / Selection Commands
    # -------------------------------------------------------------------------

    def set_canvas_size(self, width: float, height: float) -> None:
        self._interaction.canvas_size = (width, height)

    def zoom_in(self) -> None:
        if self._interaction.zoom_in():
            self.viewport_changed.emit()

    def zoom_out(self) -> None:
        if self._interaction.zoom_out():
            self.viewport_changed.emit()

    def wheel(self, delta: float) -> None:
        if self._interaction.wheel(delta):
            self.viewport_changed.emit()

    def reset_view(self) -> None:
        had_selection = self.selected_id is not None
        if self._interaction.reset():
            self.viewport_changed.emit()
            if had_selection:
                self.selection_changed.emit(None)

    def press(self, sx: float, sy: float) -> None:
        self._interaction.press(sx, sy)

    def drag(self, sx: float, sy: float) -> None:
        if self._interaction.drag(sx, sy):
            self.viewport_changed.emit()

    def release(self, sx: float, sy: float, positions: Optional[Dict[str, Point]] = None) -> None:
        """End a drag; a release in place is a click that selects (or clears)."""
        if self._interaction.release(sx, sy):
            if self._interaction.click(self._graph, sx, sy, positions):
                self.selection_changed.emit(self.selected_id)

    def hover_at(self, sx: float, sy: float, positions: Optional[Dict[str, Point]] = None) -> None:
        if self._interaction.hover(self._graph, sx, sy, positions):
            self.hover_changed.emit(self.hovered_id)

    def select_node(self, node_id: Optional[str]) -> None:
        if node_id is not None and node_id not in self._graph:
            node_id = None
        if self._interaction.select(node_id):
            self.selection_changed.emit(node_id)

    # -------------------------------------------------------------------------
    # Details
    # -------------------------------------------------------------------------

    def node_details(self, node_id: Optional[str]) -> Optional[Dict[str, Any]]:
        """Everything the details panel shows for one client."""
        node = self._graph.get(node_id)
        if node is None:
            return None
        record = self._graph.records[node.id]

        referrer_name = None
        if record.referred_by is not None:
            parent = self._graph.parent_of(node.id)
            referrer_name = parent.name if parent is not None else NOT_FOUND

        return {
            "id": node.id,
            "name": node.name,
            "ltv": node.ltv,
            "indications": node.indication_count,
            "level": node.level,
            "is_root": node.is_root,
            "city": record.city,
            "handle": record.handle,
            "email": record.email,
            "created_at": record.created_at,
            "referrer": referrer_name,
            "path_to_root": [n.name for n in self._graph.path_to_root(node.id)],
            "children": [n.name for n in self._graph.children_of(node.id)],
        }
