"""
SeriesChart - Interactive line chart for long-format time series.

Uses pyqtgraph: one curve per series on a date axis, mouse pan and zoom,
and a small overview strip below with a draggable range selector.
*WARNING: Uses PyQT5 (GPL) via pyqtgraph.*
"""

import logging
import os
from datetime import datetime
from typing import Dict, List, Optional

import numpy as np
import pandas as pd
import pyqtgraph as pg
from PyQt5.QtWidgets import QFileDialog, QMessageBox, QPushButton, QVBoxLayout, QWidget

from tscore.config_manager import get_config

logger = logging.getLogger(__name__)

EPOCH = pd.Timestamp("1970-01-01")

# tsbox palette
DEFAULT_COLORS = [
    "#4D4D4D", "#5DA5DA", "#FAA43A", "#60BD68", "#F17CB0",
    "#B2912F", "#B276B2", "#DECF3F", "#F15854",
]


def to_seconds(times) -> np.ndarray:
    """Seconds since the epoch, the x unit of pyqtgraph's DateAxisItem."""
    return np.asarray((pd.DatetimeIndex(times) - EPOCH).total_seconds(), dtype=float)


def split_series(frame: pd.DataFrame) -> Dict[str, pd.DataFrame]:
    """Split a long frame into {series name: rows sorted by time}."""
    if "id" not in frame.columns:
        return {"value": frame.sort_values("time")}
    return {str(series_id): group.sort_values("time")
            for series_id, group in frame.groupby("id", sort=False)}


class SeriesChart(QWidget):
    """
    Line chart of one or more series.

    The overview strip shows every series at full extent; dragging its
    region zooms the main plot, and panning the main plot moves the region.
    """

    def __init__(self, parent=None, title: Optional[str] = None):
        super().__init__(parent)
        config = get_config()
        self.colors: List[str] = config.get("rendering.colors", DEFAULT_COLORS) or DEFAULT_COLORS
        self.stroke_width = config.get("rendering.stroke_width", 2.5)
        self.frame: Optional[pd.DataFrame] = None
        self.curves: Dict[str, pg.PlotDataItem] = {}
        self.overview_curves: Dict[str, pg.PlotDataItem] = {}
        self._syncing = False

        layout = QVBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)
        self.setLayout(layout)

        self.plot_widget = pg.PlotWidget(title=title, axisItems={'bottom': pg.DateAxisItem(orientation='bottom')})
        draw_grid = config.get("rendering.draw_grid", True)
        self.plot_widget.showGrid(x=draw_grid, y=draw_grid)
        self.plot_widget.setMouseEnabled(x=True, y=True)
        self.legend = self.plot_widget.addLegend()
        self.plot_widget.setMinimumHeight(200)
        layout.addWidget(self.plot_widget)

        self.overview = pg.PlotWidget(axisItems={'bottom': pg.DateAxisItem(orientation='bottom')})
        self.overview.setFixedHeight(config.get("rendering.range_selector_height", 60))
        self.overview.setMouseEnabled(x=False, y=False)
        self.overview.hideAxis('left')
        self.region = pg.LinearRegionItem()
        self.region.setZValue(10)
        self.overview.addItem(self.region, ignoreBounds=True)
        layout.addWidget(self.overview)

        self.region.sigRegionChanged.connect(self._on_region_changed)
        self.plot_widget.getPlotItem().sigRangeChanged.connect(self._on_view_changed)

        self.export_button = QPushButton("Export to CSV...")
        self.export_button.setToolTip("Export chart data to CSV file")
        self.export_button.clicked.connect(lambda: self.export_to_csv())
        layout.addWidget(self.export_button)

    def color(self, index: int) -> str:
        return self.colors[index % len(self.colors)]

    def clear(self) -> None:
        """Remove all curves."""
        for curve in self.curves.values():
            self.plot_widget.removeItem(curve)
        for curve in self.overview_curves.values():
            self.overview.removeItem(curve)
        self.legend.clear()
        self.curves = {}
        self.overview_curves = {}
        self.frame = None

    def set_frame(self, frame: Optional[pd.DataFrame]) -> None:
        """Replace the plotted data; None clears the chart."""
        self.clear()
        if frame is None:
            return
        if not {"time", "value"} <= set(frame.columns):
            logger.warning(f"Cannot chart columns {list(frame.columns)}, expected time and value")
            return

        self.frame = frame
        for index, (name, rows) in enumerate(split_series(frame).items()):
            x = to_seconds(rows["time"])
            y = rows["value"].to_numpy(dtype=float)
            pen = pg.mkPen(color=self.color(index), width=self.stroke_width)
            self.curves[name] = self.plot_widget.plot(x, y, pen=pen, name=name, connect='finite')
            self.overview_curves[name] = self.overview.plot(
                x, y, pen=pg.mkPen(color=self.color(index), width=1), connect='finite')

        if len(frame):
            x_all = to_seconds(frame["time"])
            self.region.setBounds((x_all.min(), x_all.max()))
            self.region.setRegion((x_all.min(), x_all.max()))
        logger.debug(f"Charted {len(self.curves)} series")

    def _on_region_changed(self):
        if self._syncing:
            return
        self._syncing = True
        try:
            low, high = self.region.getRegion()
            self.plot_widget.setXRange(low, high, padding=0)
        finally:
            self._syncing = False

    def _on_view_changed(self, _view, view_range, *_):
        if self._syncing:
            return
        self._syncing = True
        try:
            self.region.setRegion(view_range[0])
        finally:
            self._syncing = False

    def visible_range(self):
        """Current (start, end) of the range selector as timestamps."""
        low, high = self.region.getRegion()
        return EPOCH + pd.Timedelta(seconds=low), EPOCH + pd.Timedelta(seconds=high)

    def export_to_csv(self, filepath: Optional[str] = None) -> Optional[str]:
        """Write the charted frame to CSV; asks for a path when none is given."""
        if self.frame is None:
            QMessageBox.warning(self, "No Data", "No chart data available to export.")
            return None

        if filepath is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            filepath, _ = QFileDialog.getSaveFileName(
                self,
                "Export Chart Data to CSV",
                f"series_{timestamp}.csv",
                "CSV Files (*.csv);;All Files (*)"
            )
            if not filepath:
                return None

        try:
            self.frame.to_csv(filepath, index=False)
        except OSError as e:
            logger.error(f"Failed to export chart data: {e}")
            QMessageBox.critical(self, "Export Failed", f"Failed to export data:\n{e}")
            return None
        logger.info(f"Chart data exported to {os.path.basename(filepath)} ({len(self.frame)} rows)")
        return filepath
