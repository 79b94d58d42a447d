"""Tests for command-line parsing and logging setup."""
import logging

import pytest

from scatterheat.logging_config import setup_logging
from scatterheat.main import parse_args
from scatterheat.model.records import ChartVariant


@pytest.mark.parametrize("args, expected", [
    ([], (ChartVariant.SCATTER, logging.INFO)),
    (["heatmap"], (ChartVariant.HEATMAP, logging.INFO)),
    (["--debug"], (ChartVariant.SCATTER, logging.DEBUG)),
    (["--debug", "heatmap"], (ChartVariant.HEATMAP, logging.DEBUG)),
])
def test_parse_args(args, expected):
    assert parse_args(args) == expected


def test_parse_args_rejects_unknown_variant():
    with pytest.raises(ValueError):
        parse_args(["barchart"])


def test_setup_logging_is_idempotent():
    logger = setup_logging(logging.INFO)
    setup_logging(logging.INFO)
    assert logger is logging.getLogger("scatterheat")
    assert len(logger.handlers) == 1
    assert logging.getLogger("httpx").level == logging.WARNING


def test_debug_level_lets_http_traces_through(tmp_path):
    log_file = tmp_path / "scatterheat.log"
    logger = setup_logging(logging.DEBUG, log_file=str(log_file))
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2
    assert logging.getLogger("httpx").level == logging.DEBUG

    logging.getLogger("scatterheat.tests").debug("written to file")
    for handler in logger.handlers:
        handler.flush()
    assert "written to file" in log_file.read_text(encoding="utf-8")

    # Leave the namespace as the other tests expect it
    for handler in logger.handlers:
        handler.close()
    setup_logging(logging.INFO)
