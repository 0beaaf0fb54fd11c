"""
Plotting module for tsblocks.
Contains SeriesChart, FrameTable and the Renderer choosing between them.
"""

from tscore.plotting.renderer import Renderer
from tscore.plotting.series_chart import SeriesChart
from tscore.plotting.table_view import FrameTable

__all__ = ['Renderer', 'SeriesChart', 'FrameTable']
