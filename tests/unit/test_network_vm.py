"""
Tests for NetworkVM and NetworkCanvas.

Signals are recorded by connecting plain callbacks, so these tests need
only a QApplication (offscreen).
"""

from datetime import timedelta

import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from referral_core.adapters.json_clients import JsonClientSource, StaticClientSource
from referral_core.config import EngineSettings
from referral_core.domain.enums import AnalyticsMode, LayoutMode, PerformanceBucket, PeriodPreset


@pytest.fixture
def vm(qapp, now):
    from referral_app.viewmodels.network_vm import NetworkVM
    return NetworkVM(EngineSettings(), now=lambda: now)


@pytest.fixture
def loaded_vm(vm, sample_records):
    vm.set_records(sample_records)
    return vm


def record(signal):
    """Collect every emission of a signal."""
    calls = []
    signal.connect(lambda *args: calls.append(args))
    return calls


class TestLoading:
    """Records in, graph and analytics out."""

    def test_set_records_emits(self, vm, sample_records):
        graph_calls = record(vm.graph_changed)
        analytics_calls = record(vm.analytics_changed)
        highlight_calls = record(vm.highlights_changed)

        vm.set_records(sample_records)

        assert len(graph_calls) == 1
        assert len(analytics_calls) == 1
        assert len(highlight_calls) == 1
        assert len(vm.graph) == 7
        assert vm.analytics.total_ltv == 7300

    def test_load_source(self, vm, sample_records):
        assert vm.load_source(StaticClientSource(sample_records))
        assert vm.source_description == "7 in-memory clients"
        assert vm.graph.nodes["g1"].level == 2

    def test_load_failure_keeps_graph(self, loaded_vm, tmp_path):
        errors = record(loaded_vm.error_occurred)
        assert not loaded_vm.load_source(JsonClientSource(tmp_path / "missing.json"))
        assert len(errors) == 1
        assert len(loaded_vm.graph) == 7

    def test_invalid_file_reports_error(self, vm, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{oops", encoding="utf-8")
        errors = record(vm.error_occurred)
        assert not vm.load_source(JsonClientSource(path))
        assert errors

    def test_rebuild_drops_missing_selection(self, loaded_vm, make_record):
        loaded_vm.select_node("g1")
        selections = record(loaded_vm.selection_changed)
        loaded_vm.set_records([make_record("r1")])
        assert loaded_vm.selected_id is None
        assert selections == [(None,)]

    def test_rebuild_keeps_surviving_selection(self, loaded_vm, sample_records):
        loaded_vm.select_node("c1")
        loaded_vm.set_records(sample_records[:3])
        assert loaded_vm.selected_id == "c1"


class TestSettings:
    """Display settings."""

    def test_toggle_layout(self, vm):
        calls = record(vm.settings_changed)
        vm.toggle_layout_mode()
        assert vm.settings.layout_mode is LayoutMode.CIRCULAR
        vm.toggle_layout_mode()
        assert vm.settings.layout_mode is LayoutMode.HIERARCHICAL
        assert len(calls) == 2

    def test_same_value_is_silent(self, vm):
        calls = record(vm.settings_changed)
        vm.set_layout_mode(LayoutMode.HIERARCHICAL)
        vm.set_show_labels(True)
        assert calls == []

    def test_animation_duration_clamped(self, vm):
        vm.set_animation_duration(99_999)
        assert vm.settings.animation_duration_ms == 5000

    def test_analytics_mode(self, vm):
        vm.set_analytics_mode("heatmap")
        assert vm.settings.analytics_mode is AnalyticsMode.HEATMAP

    def test_compute_layout_leaves_graph(self, loaded_vm):
        before = loaded_vm.graph.positions()
        positions = loaded_vm.compute_layout(800, 600)
        assert set(positions) == set(loaded_vm.graph.nodes)
        assert loaded_vm.graph.positions() == before


class TestFilters:
    """Filter commands and the highlight set."""

    def test_name_filter(self, loaded_vm):
        calls = record(loaded_vm.highlights_changed)
        loaded_vm.set_name_filter("  carla ")
        assert loaded_vm.highlights == {"c1"}
        assert loaded_vm.filter_summary == "Showing 1 of 7 clients"
        assert len(calls) == 1

    def test_unchanged_highlights_silent(self, loaded_vm):
        loaded_vm.set_name_filter("carla")
        calls = record(loaded_vm.highlights_changed)
        loaded_vm.set_name_filter("CARLA")
        assert calls == []

    def test_no_filter_shows_all(self, loaded_vm):
        assert loaded_vm.highlights == set()
        assert loaded_vm.filter_summary == "Showing 7 of 7 clients"

    def test_ltv_and_bucket(self, loaded_vm):
        loaded_vm.set_ltv_range((0, 1000))
        loaded_vm.set_performance_bucket(PerformanceBucket.MEDIUM)
        assert loaded_vm.highlights == {"r2"}

    def test_period(self, vm, make_record, now):
        vm.set_records([
            make_record("new", created_at=now - timedelta(days=3)),
            make_record("old", created_at=now - timedelta(days=60)),
        ])
        vm.set_period(PeriodPreset.LAST_7_DAYS)
        assert vm.highlights == {"new"}
        vm.set_period(PeriodPreset.ALL)
        assert vm.highlights == set()

    def test_clear_filters(self, loaded_vm):
        loaded_vm.set_name_filter("ana")
        loaded_vm.set_period(PeriodPreset.LAST_30_DAYS)
        loaded_vm.clear_filters()
        assert loaded_vm.period is PeriodPreset.ALL
        assert not loaded_vm.criteria.is_active()
        assert loaded_vm.highlights == set()

    def test_highlights_is_copy(self, loaded_vm):
        loaded_vm.set_name_filter("ana")
        loaded_vm.highlights.clear()
        assert loaded_vm.highlights == {"r1"}


class TestViewportAndSelection:
    """Pan, zoom, hover and click through the ViewModel."""

    def test_zoom_signals(self, vm):
        calls = record(vm.viewport_changed)
        vm.zoom_in()
        vm.wheel(-120)
        assert len(calls) == 2

    def test_zoom_clamped_is_silent(self, vm):
        for _ in range(20):
            vm.zoom_in()
        calls = record(vm.viewport_changed)
        vm.zoom_in()
        assert calls == []
        assert vm.interaction.viewport.zoom == 3.0

    def test_drag_pans(self, vm):
        vm.press(100, 100)
        vm.drag(130, 90)
        vm.release(130, 90)
        assert (vm.interaction.viewport.pan_x, vm.interaction.viewport.pan_y) == (30, -10)
        assert vm.selected_id is None

    def test_click_selects(self, loaded_vm):
        loaded_vm.graph.set_positions(loaded_vm.compute_layout(800, 600))
        x, y = loaded_vm.graph.nodes["c2"].position
        calls = record(loaded_vm.selection_changed)
        loaded_vm.press(x, y)
        loaded_vm.release(x, y)
        assert loaded_vm.selected_id == "c2"
        assert calls == [("c2",)]

    def test_hover(self, loaded_vm):
        loaded_vm.graph.set_positions(loaded_vm.compute_layout(800, 600))
        x, y = loaded_vm.graph.nodes["r1"].position
        calls = record(loaded_vm.hover_changed)
        loaded_vm.hover_at(x + 2, y)
        loaded_vm.hover_at(x + 3, y)
        assert loaded_vm.hovered_id == "r1"
        assert calls == [("r1",)]

    def test_select_unknown_is_none(self, loaded_vm):
        loaded_vm.select_node("c1")
        loaded_vm.select_node("nobody")
        assert loaded_vm.selected_id is None

    def test_reset_view_clears_selection(self, loaded_vm):
        loaded_vm.select_node("c1")
        loaded_vm.zoom_in()
        selections = record(loaded_vm.selection_changed)
        loaded_vm.reset_view()
        assert loaded_vm.interaction.viewport.zoom == 1.0
        assert selections == [(None,)]


class TestNodeDetails:
    """Details panel content."""

    def test_child(self, loaded_vm):
        details = loaded_vm.node_details("g1")
        assert details["referrer"] == "Carla Dias"
        assert details["path_to_root"] == ["Gabi Alves", "Carla Dias", "Ana Souza"]
        assert details["level"] == 2
        assert details["is_root"] is False

    def test_root(self, loaded_vm):
        details = loaded_vm.node_details("r1")
        assert details["referrer"] is None
        assert details["children"] == ["Carla Dias", "Diego Melo", "Elisa Rocha"]
        assert details["indications"] == 3
        assert details["city"] == "Recife"
        assert details["handle"] == "@ana"

    def test_dangling_referrer(self, vm, make_record):
        from referral_app.viewmodels.network_vm import NOT_FOUND
        vm.set_records([make_record("x", referred_by="ghost")])
        assert vm.node_details("x")["referrer"] == NOT_FOUND
        assert vm.node_details("x")["is_root"] is True

    def test_unknown(self, loaded_vm):
        assert loaded_vm.node_details("nobody") is None
        assert loaded_vm.node_details(None) is None


class TestCanvas:
    """NetworkCanvas layout transitions."""

    @pytest.fixture
    def canvas(self, vm):
        from referral_app.views.network.canvas import NetworkCanvas
        widget = NetworkCanvas(vm)
        widget.resize(600, 400)
        yield widget
        widget.stop_animation()
        widget.deleteLater()

    def test_first_layout_snaps(self, canvas, vm, sample_records):
        vm.set_records(sample_records)
        assert not canvas.is_animating
        assert canvas.current_positions() == vm.graph.positions()
        for x, y in vm.graph.positions().values():
            assert 50 <= x <= 550
            assert 50 <= y <= 350

    def test_mode_change_animates(self, canvas, vm, sample_records):
        vm.set_records(sample_records)
        vm.toggle_layout_mode()
        assert canvas.is_animating
        assert canvas.animator.is_running

        canvas.stop_animation()
        assert not canvas.is_animating
        assert not canvas.animator.is_running

    def test_zero_duration_snaps(self, canvas, vm, sample_records):
        vm.set_animation_duration(0)
        vm.set_records(sample_records)
        vm.toggle_layout_mode()
        assert not canvas.is_animating
        assert canvas.current_positions() == vm.compute_layout(canvas.width(), canvas.height())

    def test_relayout_without_animation(self, canvas, vm, sample_records):
        vm.set_records(sample_records)
        vm.set_layout_mode(LayoutMode.CIRCULAR)
        canvas.relayout(animate=False)
        assert not canvas.is_animating
        assert vm.graph.positions() == vm.compute_layout(canvas.width(), canvas.height())

    def test_scene_reflects_vm(self, canvas, vm, sample_records):
        vm.set_records(sample_records)
        vm.set_name_filter("ana")
        vm.select_node("c1")
        scene = canvas.current_scene()
        assert scene.highlights == {"r1"}
        assert scene.interaction.selected_id == "c1"
        assert scene.layout_mode is LayoutMode.HIERARCHICAL

    def test_grab(self, canvas, vm, sample_records):
        vm.set_records(sample_records)
        pixmap = canvas.grab()
        assert not pixmap.isNull()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
