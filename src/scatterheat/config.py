"""
Configuration & Global Constants
================================
This module serves as the central registry for dataset locations, chart
dimensions and the colour palette.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (padding, radius, timer intervals)
   from being scattered throughout the pipeline and the widgets.
2. Multiple charts: Every ChartContext reads its defaults from here instead of
   sharing module-level state.

Exports:
    DATASET_URLS (dict): Default JSON source per chart variant.
    CHART_HEIGHT, PADDING, DOT_RADIUS: Geometry defaults.
    RESIZE_DEBOUNCE_MS: Quiet period before a resize triggers a relayout.
    COLORS: Fill colour per visual class.
"""
from scatterheat.model.records import ChartVariant

VISIBLE_APP_NAME = "ScatterHeat"

DATASET_URLS: dict[ChartVariant, str] = {
    ChartVariant.SCATTER: "https://raw.githubusercontent.com/freeCodeCamp/ProjectReferenceData/master/cyclist-data.json",
    ChartVariant.HEATMAP: "https://raw.githubusercontent.com/freeCodeCamp/ProjectReferenceData/master/global-temperature.json",
}

# Seconds; None would wait forever
FETCH_TIMEOUT: float = 30.0

# Chart geometry (px)
CHART_HEIGHT: int = 600
PADDING: int = 50
DOT_RADIUS: float = 5.0
MIN_CHART_WIDTH: int = 200

RESIZE_DEBOUNCE_MS: int = 500

# Fill colour per visual class
COLORS: dict[str, str] = {
    "doping": "#fb923c",   # orange-400
    "clean": "#2dd4bf",    # teal-400
    "coolest": "#2563eb",
    "cool": "#93c5fd",
    "warm": "#fdba74",
    "warmest": "#dc2626",
}
ACTIVE_COLOR: str = "#6366f1"  # indigo-500
HOVER_COLOR: str = "#818cf8"
AXIS_COLOR: str = "#1f2937"
