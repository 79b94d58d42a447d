"""
Application Initialization
==========================
This module wires the chart pipeline to the main window and starts the Qt
Event Loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Instantiates the ChartContext (dataset, selection store, controllers).
2. Instantiates the Main Window (View) around it.
3. Kicks off the initial dataset fetch once the window is on screen.
"""
import logging
import sys

from PySide6.QtWidgets import QApplication

from scatterheat import config
from scatterheat.controller.chart import ChartContext
from scatterheat.logging_config import setup_logging
from scatterheat.model.records import ChartVariant
from scatterheat.view.main_window import MainWindow


DEBUG_FLAG = "--debug"


def parse_args(args: list[str]) -> tuple[ChartVariant, int]:
    """
    Read `[scatter|heatmap] [--debug]` (in any order).

    Raises:
        ValueError: If the variant name is unknown.
    """
    level = logging.DEBUG if DEBUG_FLAG in args else logging.INFO
    positional = [a for a in args if a != DEBUG_FLAG]
    variant = ChartVariant(positional[0]) if positional else ChartVariant.SCATTER
    return variant, level


def main() -> None:
    # 1. Create the Qt Application (it strips Qt's own options from argv)
    app = QApplication(sys.argv)
    app.setApplicationName(config.VISIBLE_APP_NAME)

    # 2. Pick the chart variant ("scatter" unless told otherwise) and log level
    variant, level = parse_args(app.arguments()[1:])

    # 3. Setup Logging (Console)
    setup_logging(level=level)

    # 4. Initialize the chart and the Main Window
    chart = ChartContext(variant)
    window = MainWindow(chart)
    window.show()

    # 5. Fetch the dataset, then start the Event Loop
    chart.load()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
