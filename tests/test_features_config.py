from __future__ import annotations

import pytest

from lunarcal.features.config import (
    SOLAR_TERM_NAMES,
    lunar_month_display_name,
    solar_term_info,
    unknown_solar_term_names,
)


def test_twenty_four_terms():
    assert len(SOLAR_TERM_NAMES) == 24
    assert len(set(SOLAR_TERM_NAMES)) == 24


def test_solar_term_info():
    info = solar_term_info("冬至")
    assert info.deg == 270
    assert info.kind == "中氣"
    assert solar_term_info("小寒").kind == "節"
    with pytest.raises(KeyError):
        solar_term_info("春節")


def test_unknown_names():
    assert unknown_solar_term_names(["立春", "春節", "春節", "夏至"]) == ["春節"]


def test_month_display_name():
    assert lunar_month_display_name(1, False) == "正月"
    assert lunar_month_display_name(4, True) == "閏四月"
    with pytest.raises(ValueError):
        lunar_month_display_name(0, False)
