"""
FrameTable - plain table view of a data frame.
"""

import logging
from typing import Optional

import numpy as np
import pandas as pd
from PyQt5.QtWidgets import QAbstractItemView, QTableWidget, QTableWidgetItem

from tscore.config_manager import get_config

logger = logging.getLogger(__name__)


def format_cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, pd.Timestamp):
        if value == value.normalize():
            return value.strftime("%Y-%m-%d")
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, (float, np.floating)):
        return "" if np.isnan(value) else f"{value:.6g}"
    return str(value)


class FrameTable(QTableWidget):
    """Read-only table of the first ``rendering.table_max_rows`` rows."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.max_rows = get_config().get("rendering.table_max_rows", 1000)
        self.frame: Optional[pd.DataFrame] = None
        self.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.setAlternatingRowColors(True)

    def clear(self) -> None:
        super().clear()
        self.setRowCount(0)
        self.setColumnCount(0)
        self.frame = None

    def set_frame(self, frame: Optional[pd.DataFrame]) -> None:
        self.clear()
        if frame is None:
            return
        self.frame = frame
        shown = frame.head(self.max_rows)
        if len(frame) > self.max_rows:
            logger.info(f"Showing {self.max_rows} of {len(frame)} rows")

        self.setColumnCount(len(shown.columns))
        self.setRowCount(len(shown))
        self.setHorizontalHeaderLabels([str(c) for c in shown.columns])
        for row, values in enumerate(shown.itertuples(index=False)):
            for column, value in enumerate(values):
                self.setItem(row, column, QTableWidgetItem(format_cell(value)))
        self.resizeColumnsToContents()
