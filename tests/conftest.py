"""Shared fixtures: headless Qt application and small sample datasets."""
import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtWidgets import QApplication

from scatterheat.model.io import parse_heatmap, parse_scatter


@pytest.fixture(scope="session")
def qapp():
    """One QApplication for the whole test session."""
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def scatter_payload():
    return [
        {"Year": 1994, "Time": "36:15", "Name": "X", "Nationality": "Y", "Doping": ""},
        {"Year": 1998, "Time": "35:12", "Name": "Z", "Nationality": "W", "Doping": "EPO"},
    ]


@pytest.fixture
def scatter_dataset(scatter_payload):
    return parse_scatter(scatter_payload)


@pytest.fixture
def heatmap_payload():
    return {
        "baseTemperature": 8.0,
        "monthlyVariance": [
            {"year": 1900, "month": 1, "variance": -2.5},
            {"year": 1900, "month": 2, "variance": 0.0},
            {"year": 1901, "month": 1, "variance": 1.0},
            {"year": 1902, "month": 12, "variance": 1.3},
        ],
    }


@pytest.fixture
def heatmap_dataset(heatmap_payload):
    return parse_heatmap(heatmap_payload)
