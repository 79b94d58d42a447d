"""Tests for tooltip/detail/comparison text and the summary stats."""
from datetime import date

from scatterheat.model.io import parse_heatmap, parse_scatter
from scatterheat.model.records import ChartVariant, Dataset
from scatterheat.view.renderers import (
    PLACEHOLDERS, date_difference, format_comparison, format_record, summary_stats
)


def test_scatter_detail_text(scatter_dataset):
    text = format_record(scatter_dataset.records[1], scatter_dataset)
    assert "Name: Z, W" in text
    assert "Year: 1998" in text
    assert "Time: 35:12" in text
    assert "Doping: EPO" in text


def test_scatter_detail_omits_empty_doping(scatter_dataset):
    assert "Doping" not in format_record(scatter_dataset.records[0], scatter_dataset)


def test_heatmap_tooltip_text(heatmap_dataset):
    text = format_record(heatmap_dataset.records[0], heatmap_dataset)
    assert "Year: 1900" in text
    assert "Month: January" in text
    assert "Temperature: 5.5°C" in text
    assert "Variance: -2.5°C" in text


def test_heatmap_variance_has_explicit_plus(heatmap_dataset):
    assert "Variance: +1.3°C" in format_record(heatmap_dataset.records[3], heatmap_dataset)


def test_placeholders(scatter_dataset, heatmap_dataset):
    assert format_record(None, scatter_dataset) == PLACEHOLDERS[ChartVariant.SCATTER]
    assert format_record(None, heatmap_dataset) == PLACEHOLDERS[ChartVariant.HEATMAP]
    assert format_record(None, None, ChartVariant.HEATMAP) == PLACEHOLDERS[ChartVariant.HEATMAP]


def test_stale_record_falls_back_to_placeholder(scatter_dataset, scatter_payload):
    reloaded = parse_scatter(scatter_payload)
    assert format_record(scatter_dataset.records[0], reloaded) == PLACEHOLDERS[ChartVariant.SCATTER]


def test_date_difference():
    assert date_difference(date(1998, 1, 1), date(1994, 1, 1)) == "4 years and 0 months"
    assert date_difference(date(1900, 1, 1), date(1901, 4, 1)) == "1 years and 3 months"


def test_comparison_between_pinned_and_hovered(scatter_dataset):
    first, second = scatter_dataset.records
    text = format_comparison(pinned=first, hovered=second, dataset=scatter_dataset)
    assert "4 years and 0 months" in text
    assert "Time difference: -1:03" in text

    text = format_comparison(pinned=second, hovered=first, dataset=scatter_dataset)
    assert "Time difference: +1:03" in text


def test_comparison_heatmap_delta(heatmap_dataset):
    pinned, hovered = heatmap_dataset.records[0], heatmap_dataset.records[2]
    text = format_comparison(pinned, hovered, heatmap_dataset)
    assert "1 years and 0 months" in text
    assert "Temperature difference: +3.5°C" in text


def test_comparison_is_empty_without_both(scatter_dataset):
    first = scatter_dataset.records[0]
    assert format_comparison(first, None, scatter_dataset) == ""
    assert format_comparison(None, first, scatter_dataset) == ""
    assert format_comparison(first, first, scatter_dataset) == ""


def test_summary_stats_scatter(scatter_dataset):
    stats = summary_stats(scatter_dataset)
    assert stats.total == "2"
    assert stats.max_value == "36:15"
    assert stats.min_value == "35:12"


def test_summary_stats_heatmap(heatmap_payload):
    stats = summary_stats(parse_heatmap(heatmap_payload))
    assert stats.total == "4"
    assert stats.max_value == "9.3°C"
    assert stats.min_value == "5.5°C"


def test_summary_stats_empty():
    stats = summary_stats(Dataset(variant=ChartVariant.SCATTER))
    assert (stats.total, stats.max_value, stats.min_value) == ("0", "-", "-")
