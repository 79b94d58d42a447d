"""
Main Application Window
=======================
The primary GUI container: stats bar on top, chart in the centre, pinned
details on the right and a status line for load errors.

Why is this file needed?
------------------------
1. Layout: It organizes the high-level visual structure of the application.
2. Routing: It connects the ChartContext signals to the stats bar and the
   renderers, and forwards window-level actions (reload, close).
"""
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QCloseEvent
from PySide6.QtWidgets import (
    QFormLayout, QGroupBox, QHBoxLayout, QLabel, QMainWindow, QVBoxLayout, QWidget
)

from scatterheat import config
from scatterheat.controller.chart import ChartContext
from scatterheat.model.records import Dataset
from scatterheat.view.chart_widget import ChartWidget
from scatterheat.view.renderers import ComparisonRenderer, DetailPanelRenderer, TooltipRenderer, summary_stats

logger = logging.getLogger(__name__)

TITLES = {
    "scatter": "Doping in Professional Bicycle Racing",
    "heatmap": "Monthly Global Land-Surface Temperature",
}


class MainWindow(QMainWindow):
    def __init__(self, chart: ChartContext, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.chart = chart
        self.setWindowTitle(f"{config.VISIBLE_APP_NAME} - {TITLES[chart.variant]}")
        self.resize(1200, config.CHART_HEIGHT + 120)

        main_widget = QWidget()
        self.setCentralWidget(main_widget)
        main_layout = QVBoxLayout(main_widget)

        # --- 1. STATS BAR ---
        stats_layout = QHBoxLayout()
        self.lbl_total = self._stat_label("total-items")
        self.lbl_max = self._stat_label("max-value")
        self.lbl_min = self._stat_label("min-value")
        for caption, label in (("Total items:", self.lbl_total), ("Max:", self.lbl_max), ("Min:", self.lbl_min)):
            stats_layout.addWidget(QLabel(caption))
            stats_layout.addWidget(label)
            stats_layout.addSpacing(24)
        stats_layout.addStretch()
        main_layout.addLayout(stats_layout)

        # --- 2. CHART + DETAILS ---
        body_layout = QHBoxLayout()
        self.chart_widget = ChartWidget(chart)
        self.chart_widget.setObjectName("chart-container")
        body_layout.addWidget(self.chart_widget, stretch=1)

        grp_details = QGroupBox("Details")
        grp_details.setMaximumWidth(300)
        details_layout = QFormLayout(grp_details)
        self.lbl_blocked = QLabel()
        self.lbl_blocked.setObjectName("blocked-info")
        self.lbl_blocked.setWordWrap(True)
        self.lbl_comparison = QLabel()
        self.lbl_comparison.setObjectName("comparison")
        self.lbl_comparison.setWordWrap(True)
        details_layout.addRow(self.lbl_blocked)
        details_layout.addRow(self.lbl_comparison)
        body_layout.addWidget(grp_details)
        main_layout.addLayout(body_layout, stretch=1)

        # --- 3. STATUS ---
        self.lbl_status = QLabel()
        self.lbl_status.setObjectName("status")
        self.lbl_status.setStyleSheet("color: #b91c1c;")
        main_layout.addWidget(self.lbl_status)

        # --- Renderers (store observers) ---
        self.detail_renderer = DetailPanelRenderer(self.lbl_blocked, chart)
        self.tooltip_renderer = TooltipRenderer(self.chart_widget.tooltip, chart, anchor=self.chart_widget.tooltip_anchor)
        self.comparison_renderer = ComparisonRenderer(self.lbl_comparison, chart)

        # --- Actions ---
        act_reload = QAction("Reload", self)
        act_reload.setShortcut("F5")
        act_reload.triggered.connect(self.reload)
        self.addAction(act_reload)

        chart.dataset_changed.connect(self.update_stats)
        chart.load_started.connect(lambda: self.lbl_status.setText("Loading dataset..."))
        chart.load_failed.connect(self.show_error)
        chart.geometry_changed.connect(lambda *_: self.lbl_status.clear())

    @staticmethod
    def _stat_label(name: str) -> QLabel:
        label = QLabel("-")
        label.setObjectName(name)
        label.setAlignment(Qt.AlignLeft | Qt.AlignVCenter)
        return label

    def update_stats(self, dataset: Dataset) -> None:
        stats = summary_stats(dataset)
        self.lbl_total.setText(stats.total)
        self.lbl_max.setText(stats.max_value)
        self.lbl_min.setText(stats.min_value)

    def show_error(self, message: str) -> None:
        logger.warning(f"Dataset could not be loaded: {message}")
        self.lbl_status.setText(f"Could not load data: {message}")

    def reload(self) -> None:
        self.chart.load()

    def closeEvent(self, event: QCloseEvent) -> None:
        self.chart.close()
        super().closeEvent(event)
