"""
Styles for the referral network app.

Dark navy theme with a violet accent, matching the network canvas.
"""

COLORS = {
    "bg_primary": "#080c18",
    "bg_secondary": "#0f1526",
    "bg_tertiary": "#171f35",
    "text_primary": "#e5e7eb",
    "text_secondary": "#9ca3af",
    "accent": "#8b5cf6",
    "accent_hover": "#a78bfa",
    "border": "#232c45",
    "highlight": "#fbbf24",
}

DARK_STYLESHEET = """
QMainWindow, QWidget {
    background-color: #080c18;
    color: #e5e7eb;
    font-family: "Segoe UI", sans-serif;
}

QGroupBox {
    border: 1px solid #232c45;
    border-radius: 6px;
    margin-top: 10px;
    padding-top: 10px;
    font-weight: bold;
}
QGroupBox::title {
    subcontrol-origin: margin;
    left: 10px;
    padding: 0 5px;
    color: #8b5cf6;
}

QPushButton {
    background-color: #171f35;
    color: #e5e7eb;
    padding: 6px 12px;
    border-radius: 4px;
    border: 1px solid #232c45;
}
QPushButton:hover {
    background-color: #232c45;
    border-color: #8b5cf6;
}
QPushButton:checked {
    background-color: #8b5cf6;
    color: white;
}

QLineEdit, QDoubleSpinBox, QComboBox {
    background-color: #0f1526;
    color: #e5e7eb;
    border: 1px solid #232c45;
    border-radius: 4px;
    padding: 5px 8px;
}
QLineEdit:focus, QDoubleSpinBox:focus, QComboBox:focus {
    border-color: #8b5cf6;
}
QComboBox QAbstractItemView {
    background-color: #0f1526;
    color: #e5e7eb;
    selection-background-color: #8b5cf6;
}

QLabel#metricValue {
    color: #a78bfa;
    font-size: 16px;
    font-weight: bold;
}
QLabel#filterSummary {
    color: #9ca3af;
}

QSplitter::handle {
    background-color: #232c45;
}
QSplitter::handle:horizontal {
    width: 4px;
}

QStatusBar {
    background-color: #0f1526;
    color: #9ca3af;
}

QToolTip {
    background-color: #171f35;
    color: #e5e7eb;
    border: 1px solid #232c45;
    padding: 4px;
}
"""
