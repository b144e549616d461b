"""
Main Window for the referral network app.

Thin view layer using MVVM pattern:
- NetworkVM holds state and commands
- NetworkCanvas paints the graph
- This window lays out the side panel and binds widgets to the VM
"""

import html
import logging
from pathlib import Path
from typing import Optional

from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QFormLayout, QLabel,
    QPushButton, QLineEdit, QSplitter, QStatusBar, QGroupBox, QFileDialog,
    QMessageBox, QComboBox, QCheckBox, QDoubleSpinBox, QSlider, QScrollArea,
)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction

from referral_core.adapters.json_clients import JsonClientSource
from referral_core.config import EngineSettings
from referral_core.domain.enums import AnalyticsMode, LayoutMode, PerformanceBucket, PeriodPreset

from ..viewmodels import NetworkVM
from .network import NetworkCanvas, RenderUnavailable, export_pdf, export_png, export_svg

logger = logging.getLogger(__name__)

PERIOD_LABELS = [
    ("All time", PeriodPreset.ALL),
    ("Last 7 days", PeriodPreset.LAST_7_DAYS),
    ("Last 30 days", PeriodPreset.LAST_30_DAYS),
    ("Last 90 days", PeriodPreset.LAST_90_DAYS),
    ("Last year", PeriodPreset.LAST_YEAR),
]

BUCKET_LABELS = [
    ("Any performance", None),
    ("High (3+ indications)", PerformanceBucket.HIGH),
    ("Medium (1-2)", PerformanceBucket.MEDIUM),
    ("Low (0)", PerformanceBucket.LOW),
]


class MainWindow(QMainWindow):
    """Main application window using MVVM pattern."""

    def __init__(self, settings: Optional[EngineSettings] = None, clients_path: Optional[Path] = None):
        super().__init__()

        self.setWindowTitle("Referral Network")
        self.resize(1400, 900)

        self._vm = NetworkVM(settings)

        self._setup_ui()
        self._setup_menu()
        self._setup_status_bar()
        self._bind_viewmodel()

        if clients_path is not None:
            self.open_clients(clients_path)

    @property
    def vm(self) -> NetworkVM:
        return self._vm

    @property
    def canvas(self) -> NetworkCanvas:
        return self._canvas

    # -------------------------------------------------------------------------
    # UI Setup
    # -------------------------------------------------------------------------

    def _setup_ui(self):
        splitter = QSplitter(Qt.Orientation.Horizontal)

        self._canvas = NetworkCanvas(self._vm)
        splitter.addWidget(self._canvas)

        panel = QWidget()
        panel_layout = QVBoxLayout(panel)
        panel_layout.addWidget(self._create_filter_group())
        panel_layout.addWidget(self._create_view_group())
        panel_layout.addWidget(self._create_metrics_group())
        panel_layout.addWidget(self._create_details_group())
        panel_layout.addStretch()

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(panel)
        scroll.setMinimumWidth(320)
        splitter.addWidget(scroll)

        splitter.setStretchFactor(0, 3)
        splitter.setStretchFactor(1, 1)
        self.setCentralWidget(splitter)

    def _create_filter_group(self) -> QGroupBox:
        group = QGroupBox("Filters")
        form = QFormLayout(group)

        self._search_box = QLineEdit()
        self._search_box.setPlaceholderText("Search by name...")
        form.addRow(self._search_box)

        self._period_combo = QComboBox()
        for label, preset in PERIOD_LABELS:
            self._period_combo.addItem(label, preset)
        form.addRow("Period:", self._period_combo)

        self._ltv_check = QCheckBox("Filter by LTV")
        self._ltv_min = QDoubleSpinBox()
        self._ltv_max = QDoubleSpinBox()
        for spin in (self._ltv_min, self._ltv_max):
            spin.setRange(0, 10_000_000)
            spin.setDecimals(0)
            spin.setSingleStep(500)
            spin.setEnabled(False)
        self._ltv_max.setValue(10_000)
        ltv_row = QHBoxLayout()
        ltv_row.addWidget(self._ltv_min)
        ltv_row.addWidget(QLabel("to"))
        ltv_row.addWidget(self._ltv_max)
        form.addRow(self._ltv_check)
        form.addRow("LTV:", ltv_row)

        self._bucket_combo = QComboBox()
        for label, bucket in BUCKET_LABELS:
            self._bucket_combo.addItem(label, bucket)
        form.addRow("Performance:", self._bucket_combo)

        self._clear_btn = QPushButton("Clear filters")
        form.addRow(self._clear_btn)

        self._summary_label = QLabel()
        self._summary_label.setObjectName("filterSummary")
        form.addRow(self._summary_label)
        return group

    def _create_view_group(self) -> QGroupBox:
        group = QGroupBox("View")
        layout = QVBoxLayout(group)

        self._layout_btn = QPushButton()
        layout.addWidget(self._layout_btn)

        self._labels_check = QCheckBox("Show labels")
        self._labels_check.setChecked(self._vm.settings.show_labels)
        layout.addWidget(self._labels_check)

        self._analytics_combo = QComboBox()
        self._analytics_combo.addItem("Metrics", AnalyticsMode.METRICS)
        self._analytics_combo.addItem("Heatmap", AnalyticsMode.HEATMAP)
        layout.addWidget(self._analytics_combo)

        speed_row = QHBoxLayout()
        speed_row.addWidget(QLabel("Animation:"))
        self._speed_slider = QSlider(Qt.Orientation.Horizontal)
        self._speed_slider.setRange(100, 1000)
        self._speed_slider.setSingleStep(50)
        self._speed_slider.setValue(self._vm.settings.animation_duration_ms)
        speed_row.addWidget(self._speed_slider)
        self._speed_label = QLabel(f"{self._vm.settings.animation_duration_ms} ms")
        speed_row.addWidget(self._speed_label)
        layout.addLayout(speed_row)

        zoom_row = QHBoxLayout()
        self._zoom_in_btn = QPushButton("+")
        self._zoom_out_btn = QPushButton("-")
        self._reset_btn = QPushButton("Reset")
        for btn in (self._zoom_in_btn, self._zoom_out_btn, self._reset_btn):
            zoom_row.addWidget(btn)
        layout.addLayout(zoom_row)

        export_row = QHBoxLayout()
        self._png_btn = QPushButton("PNG")
        self._svg_btn = QPushButton("SVG")
        self._pdf_btn = QPushButton("PDF")
        for btn in (self._png_btn, self._svg_btn, self._pdf_btn):
            export_row.addWidget(btn)
        layout.addLayout(export_row)
        return group

    def _create_metrics_group(self) -> QGroupBox:
        group = QGroupBox("Network")
        form = QFormLayout(group)
        self._metric_labels = {}
        for key, title in (
            ("total_clients", "Clients"),
            ("root_count", "Root clients"),
            ("total_indications", "Indications"),
            ("max_generations", "Generations"),
            ("total_ltv", "Total LTV"),
            ("avg", "Avg indications"),
            ("growth", "Growth (30d)"),
            ("top", "Top referrers"),
        ):
            label = QLabel("-")
            label.setObjectName("metricValue")
            label.setWordWrap(True)
            self._metric_labels[key] = label
            form.addRow(f"{title}:", label)
        return group

    def _create_details_group(self) -> QGroupBox:
        group = QGroupBox("Client")
        layout = QVBoxLayout(group)
        self._details_label = QLabel("Click a node to see its details")
        self._details_label.setWordWrap(True)
        self._details_label.setTextFormat(Qt.TextFormat.RichText)
        layout.addWidget(self._details_label)
        return group

    def _setup_menu(self):
        file_menu = self.menuBar().addMenu("&File")

        open_action = QAction("&Open clients...", self)
        open_action.setShortcut("Ctrl+O")
        open_action.triggered.connect(self._on_open)
        file_menu.addAction(open_action)

        file_menu.addSeparator()
        quit_action = QAction("&Quit", self)
        quit_action.setShortcut("Ctrl+Q")
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

    def _setup_status_bar(self):
        self.setStatusBar(QStatusBar())
        self.statusBar().showMessage("Open a client list (File > Open)")

    # -------------------------------------------------------------------------
    # Binding
    # -------------------------------------------------------------------------

    def _bind_viewmodel(self):
        vm = self._vm

        # Widgets -> VM
        self._search_box.textChanged.connect(vm.set_name_filter)
        self._period_combo.currentIndexChanged.connect(
            lambda _i: vm.set_period(self._period_combo.currentData())
        )
        self._ltv_check.toggled.connect(self._on_ltv_changed)
        self._ltv_min.valueChanged.connect(lambda _v: self._on_ltv_changed())
        self._ltv_max.valueChanged.connect(lambda _v: self._on_ltv_changed())
        self._bucket_combo.currentIndexChanged.connect(
            lambda _i: vm.set_performance_bucket(self._bucket_combo.currentData())
        )
        self._clear_btn.clicked.connect(self._on_clear_filters)

        self._layout_btn.clicked.connect(vm.toggle_layout_mode)
        self._labels_check.toggled.connect(vm.set_show_labels)
        self._analytics_combo.currentIndexChanged.connect(
            lambda _i: vm.set_analytics_mode(self._analytics_combo.currentData())
        )
        self._speed_slider.valueChanged.connect(vm.set_animation_duration)
        self._zoom_in_btn.clicked.connect(vm.zoom_in)
        self._zoom_out_btn.clicked.connect(vm.zoom_out)
        self._reset_btn.clicked.connect(vm.reset_view)

        self._png_btn.clicked.connect(lambda: self._on_export("png"))
        self._svg_btn.clicked.connect(lambda: self._on_export("svg"))
        self._pdf_btn.clicked.connect(lambda: self._on_export("pdf"))

        # VM -> widgets
        vm.analytics_changed.connect(self._refresh_metrics)
        vm.highlights_changed.connect(self._refresh_summary)
        vm.graph_changed.connect(self._refresh_summary)
        vm.settings_changed.connect(self._refresh_settings)
        vm.selection_changed.connect(self._refresh_details)
        vm.error_occurred.connect(self._on_error)

        self._refresh_settings()
        self._refresh_summary()

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def open_clients(self, path: Path) -> bool:
        """Load a JSON client list into the view."""
        if self._vm.load_source(JsonClientSource(path)):
            self.setWindowTitle(f"Referral Network - {Path(path).name}")
            self.statusBar().showMessage(f"Loaded {len(self._vm.graph)} clients from {path}")
            return True
        return False

    def _on_open(self):
        filename, _ = QFileDialog.getOpenFileName(
            self, "Open client list", "", "JSON Files (*.json);;All Files (*)"
        )
        if filename:
            self.open_clients(Path(filename))

    def _on_ltv_changed(self, *_args):
        enabled = self._ltv_check.isChecked()
        self._ltv_min.setEnabled(enabled)
        self._ltv_max.setEnabled(enabled)
        if enabled:
            self._vm.set_ltv_range((self._ltv_min.value(), self._ltv_max.value()))
        else:
            self._vm.set_ltv_range(None)

    def _on_clear_filters(self):
        for widget in (self._search_box, self._period_combo, self._ltv_check, self._bucket_combo):
            widget.blockSignals(True)
        self._search_box.clear()
        self._period_combo.setCurrentIndex(0)
        self._ltv_check.setChecked(False)
        self._bucket_combo.setCurrentIndex(0)
        for widget in (self._search_box, self._period_combo, self._ltv_check, self._bucket_combo):
            widget.blockSignals(False)
        self._ltv_min.setEnabled(False)
        self._ltv_max.setEnabled(False)
        self._vm.clear_filters()

    def _on_export(self, fmt: str):
        filters = {"png": "PNG Files (*.png)", "svg": "SVG Files (*.svg)", "pdf": "PDF Files (*.pdf)"}
        filename, _ = QFileDialog.getSaveFileName(
            self, f"Export network as {fmt.upper()}", f"referral_network.{fmt}", filters[fmt]
        )
        if not filename:
            return

        exporter = {"png": export_png, "svg": export_svg, "pdf": export_pdf}[fmt]
        scene = self._canvas.current_scene()
        try:
            exporter(self._canvas.renderer, scene, filename, self._canvas.width(), self._canvas.height())
        except RenderUnavailable as e:
            QMessageBox.warning(self, "Export failed", str(e))
            return
        self.statusBar().showMessage(f"Exported {filename}")

    def _on_error(self, message: str):
        QMessageBox.critical(self, "Could not load clients", message)

    # -------------------------------------------------------------------------
    # Refresh
    # -------------------------------------------------------------------------

    def _refresh_settings(self):
        mode = self._vm.settings.layout_mode
        self._layout_btn.setText(
            "Switch to circular" if mode == LayoutMode.HIERARCHICAL else "Switch to hierarchical"
        )
        self._speed_label.setText(f"{self._vm.settings.animation_duration_ms} ms")

    def _refresh_summary(self):
        self._summary_label.setText(self._vm.filter_summary)

    def _refresh_metrics(self):
        a = self._vm.analytics
        labels = self._metric_labels
        labels["total_clients"].setText(str(a.total_clients))
        labels["root_count"].setText(str(a.root_count))
        labels["total_indications"].setText(str(a.total_indications))
        labels["max_generations"].setText(str(a.max_generations))
        labels["total_ltv"].setText(f"{a.total_ltv:,.2f}")
        labels["avg"].setText(f"{a.avg_indications_per_node:.2f}")
        labels["growth"].setText(f"{a.growth_rate:+.2f}%")
        labels["top"].setText(
            ", ".join(f"{p.name} ({p.indication_count})" for p in a.top_performers) or "-"
        )

    def _refresh_details(self, node_id):
        details = self._vm.node_details(node_id)
        if details is None:
            self._details_label.setText("Click a node to see its details")
            return

        lines = [
            f"<b>{html.escape(details['name'])}</b>",
            f"LTV: {details['ltv']:,.2f}",
            f"Indications: {details['indications']}",
            f"Generation: {details['level']}",
        ]
        for key, title in (("city", "City"), ("handle", "Handle"), ("email", "Email")):
            if details[key]:
                lines.append(f"{title}: {html.escape(str(details[key]))}")
        lines.append(f"Since: {details['created_at']:%Y-%m-%d}")
        if details["referrer"] is not None:
            lines.append(f"Referred by: {html.escape(details['referrer'])}")
        lines.append("Path: " + " &larr; ".join(html.escape(n) for n in details["path_to_root"]))
        if details["children"]:
            lines.append("Referred: " + ", ".join(html.escape(n) for n in details["children"]))
        self._details_label.setText("<br>".join(lines))

    def closeEvent(self, event):
        self._canvas.stop_animation()
        super().closeEvent(event)
