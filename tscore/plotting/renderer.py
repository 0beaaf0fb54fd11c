"""
Output renderer of a block instance.

Picks a chart or a table from the block's output kind and shows published
results in order of their generation numbers. A result older than the one on
screen is dropped.
"""

import logging
from typing import Optional

import pandas as pd

from tscore.calls import OutputKind
from tscore.plotting.series_chart import SeriesChart
from tscore.plotting.table_view import FrameTable

logger = logging.getLogger(__name__)


class Renderer:
    """
    Attributes:
        output_kind: Chart or table
        widget: The Qt widget showing the data
        generation: Generation number of the result on screen (-1 before any)
    """

    def __init__(self, output_kind: OutputKind, parent=None, title: Optional[str] = None):
        self.output_kind = output_kind
        if output_kind is OutputKind.TABLE:
            self.widget = FrameTable(parent)
        else:
            self.widget = SeriesChart(parent, title=title)
        self.generation = -1

    @classmethod
    def for_instance(cls, instance, parent=None) -> "Renderer":
        """Create a renderer for a block instance and subscribe it to its output."""
        renderer = cls(instance.block.output_kind, parent, title=instance.block.block_name)
        instance.on_output(renderer.show)
        if instance.output is not None:
            renderer.show(instance.output, instance.generation)
        return renderer

    def show(self, frame: Optional[pd.DataFrame], generation: int) -> bool:
        """
        Display a result unless a newer one is already shown.

        Returns:
            True if the widget was updated
        """
        if generation < self.generation:
            logger.debug(f"Dropping stale result {generation} (showing {self.generation})")
            return False
        self.generation = generation
        self.widget.set_frame(frame)
        return True
