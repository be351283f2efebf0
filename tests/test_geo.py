"""Tests for coordinate and country → region mapping."""

import pytest

from georisk.config import REGIONS
from georisk.geo import COUNTRY_REGIONS, country_to_region, region_from_coordinates


class TestCountryToRegion:

    @pytest.mark.parametrize("code,region", [
        ("US", "north-america"), ("ua", "europe"), ("JP", "asia-pacific"),
        ("IR", "middle-east"), ("NG", "africa"), ("BR", "south-america"),
        ("ZZ", "global"), ("", "global"), (None, "global"),
    ])
    def test_iso_codes(self, code, region):
        assert country_to_region(code) == region

    def test_country_names(self):
        assert country_to_region("United Kingdom") == "europe"
        assert country_to_region("Saudi Arabia") == "middle-east"
        assert country_to_region("Narnia") == "global"

    def test_table_only_uses_known_regions(self):
        assert set(COUNTRY_REGIONS) <= set(REGIONS)


class TestRegionFromCoordinates:

    @pytest.mark.parametrize("lat,lng,region", [
        (38.9, -77.0, "north-america"),    # Washington
        (48.8, 2.3, "europe"),             # Paris
        (35.7, 139.7, "asia-pacific"),     # Tokyo
        (32.1, 34.8, "middle-east"),       # Tel Aviv
        (-1.3, 36.8, "africa"),            # Nairobi
        (-23.5, -46.6, "south-america"),   # Sao Paulo
        (-75.0, 0.0, "global"),            # Antarctica
    ])
    def test_cities(self, lat, lng, region):
        assert region_from_coordinates(lat, lng) == region

    def test_middle_east_checked_before_overlapping_boxes(self):
        # Tehran also falls inside the Europe box
        assert region_from_coordinates(35.7, 51.4) == "middle-east"

    def test_missing_coordinates(self):
        assert region_from_coordinates(None, 10) == "global"
