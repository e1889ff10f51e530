"""Shared pytest fixtures."""
import copy
import json
import os

import pytest

FIXTURES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "fixtures")

with open(os.path.join(FIXTURES_DIR, "forecast_full.json"), encoding="utf-8") as f:
    _FULL_FORECAST = json.load(f)


@pytest.fixture
def full_forecast_payload():
    """Decoded forecast.io response with every block present."""
    return copy.deepcopy(_FULL_FORECAST)
