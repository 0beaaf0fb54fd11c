"""
tsblocks demo application.

Builds a small pipeline (dataset -> frequency -> change, plus a table view of
the dataset) and shows each block's output in its own tab. The dataset name
is taken from the command line.

Usage:
    python tsblocks_demo.py [dataset]
"""

import logging
import sys
import warnings

from PyQt5.QtWidgets import QApplication, QTabWidget

from tscore.logging_config import setup_logging
from tscore.pipeline import Pipeline
from tscore.plotting import Renderer
from tscore.registry import BlockRegistry, register_ts_blocks

logger = logging.getLogger(__name__)


def build_pipeline(dataset: str) -> Pipeline:
    registry = BlockRegistry()
    register_ts_blocks(registry)

    pipeline = Pipeline(registry)
    pipeline.add("data", "ts_dataset_block", dataset=dataset)
    pipeline.add("yearly", "ts_frequency_block", to="year", aggregate="mean")
    pipeline.add("growth", "ts_change_block", method="pc")
    pipeline.add("table", "ts_to_df_block", format="wide")
    pipeline.connect("data", "yearly")
    pipeline.connect("yearly", "growth")
    pipeline.connect("data", "table")
    return pipeline


def main():
    """Main application entry point."""
    setup_logging()
    # Silence PyQtGraph Qt version warning on older Qt (harmless noise)
    warnings.filterwarnings(
        "ignore",
        message="PyQtGraph supports Qt version >= 5.15",
        category=RuntimeWarning,
    )

    dataset = sys.argv[1] if len(sys.argv) > 1 else "AirPassengers"
    app = QApplication(sys.argv)
    app.setApplicationName("tsblocks")

    try:
        pipeline = build_pipeline(dataset)
    except Exception as e:
        logger.critical(f"Could not build pipeline: {e}", exc_info=True)
        return 1

    tabs = QTabWidget()
    tabs.setWindowTitle(f"tsblocks - {dataset}")
    renderers = {}
    for name in pipeline.order():
        renderers[name] = Renderer.for_instance(pipeline[name], tabs)
        tabs.addTab(renderers[name].widget, f"{name}: {pipeline[name].describe()}")

    pipeline.run()
    for name, error in pipeline.errors().items():
        logger.error(f"{name}: {error}")

    tabs.resize(1000, 600)
    tabs.show()
    exit_code = app.exec_()
    logger.info(f"tsblocks demo exiting with code: {exit_code}")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
