"""
Input Manager (HTTPS JSON)
Fetches a raw dataset document and parses it into a typed Dataset.
"""
from __future__ import annotations

import logging
from typing import Any

import httpx

from scatterheat.model.records import ChartVariant, Dataset, HeatmapRecord, ScatterRecord, parse_duration

logger = logging.getLogger(__name__)


class LoadError(Exception):
    """The dataset could not be fetched or did not match the expected shape."""


def fetch_json(url: str, timeout: float | None = None, client: httpx.Client | None = None) -> Any:
    """
    Download and decode a JSON document.

    Args:
        url: Address of the document.
        timeout: Request timeout in seconds (None waits indefinitely).
        client: Optional preconfigured client (tests pass one with a mock transport).

    Raises:
        LoadError: On network failure, non-2xx status or malformed JSON.
    """
    logger.info(f"Fetching dataset from: {url}")
    owns_client = client is None
    if client is None:
        client = httpx.Client(timeout=timeout, follow_redirects=True)
    try:
        response = client.get(url)
        response.raise_for_status()
        return response.json()
    except httpx.HTTPStatusError as e:
        raise LoadError(f"Server responded with {e.response.status_code} for {url}") from e
    except httpx.HTTPError as e:
        raise LoadError(f"Network error while fetching {url}: {e}") from e
    except ValueError as e:
        raise LoadError(f"Malformed JSON received from {url}: {e}") from e
    finally:
        if owns_client:
            client.close()


def parse_scatter(payload: Any) -> Dataset:
    """Parse `[{Year, Time, Name, Nationality, Doping}, ...]`."""
    if not isinstance(payload, list):
        raise LoadError(f"Expected a JSON array of results, got {type(payload).__name__}.")

    records = []
    for i, item in enumerate(payload):
        try:
            records.append(ScatterRecord(
                year=int(item["Year"]),
                seconds=parse_duration(str(item["Time"])),
                name=str(item["Name"]),
                nationality=str(item["Nationality"]),
                doping=str(item.get("Doping") or ""),
            ))
        except (KeyError, TypeError, ValueError, OverflowError) as e:
            raise LoadError(f"Invalid scatter record at index {i}: {e}") from e

    return Dataset(variant=ChartVariant.SCATTER, records=tuple(records))


def parse_heatmap(payload: Any) -> Dataset:
    """Parse `{baseTemperature, monthlyVariance: [{year, month, variance}, ...]}`."""
    if not isinstance(payload, dict):
        raise LoadError(f"Expected a JSON object, got {type(payload).__name__}.")

    try:
        base_temperature = float(payload["baseTemperature"])
        entries = payload["monthlyVariance"]
    except (KeyError, TypeError, ValueError) as e:
        raise LoadError(f"Invalid heatmap document: {e}") from e

    if not isinstance(entries, list):
        raise LoadError("'monthlyVariance' must be a JSON array.")

    records = []
    for i, item in enumerate(entries):
        try:
            records.append(HeatmapRecord(
                year=int(item["year"]),
                month=int(item["month"]),
                variance=float(item["variance"]),
            ))
        except (KeyError, TypeError, ValueError, OverflowError) as e:
            raise LoadError(f"Invalid heatmap record at index {i}: {e}") from e

    return Dataset(variant=ChartVariant.HEATMAP, records=tuple(records), base_temperature=base_temperature)


PARSERS = {
    ChartVariant.SCATTER: parse_scatter,
    ChartVariant.HEATMAP: parse_heatmap,
}


def load_dataset(
    variant: ChartVariant,
    url: str,
    timeout: float | None = None,
    client: httpx.Client | None = None,
) -> Dataset:
    """Fetch and parse in one step; the only entry point the worker uses."""
    payload = fetch_json(url, timeout=timeout, client=client)
    dataset = PARSERS[variant](payload)
    logger.info(f"Loaded {len(dataset)} {variant} records.")
    return dataset
