"""Tests for the Stock entity: weekday keys, defaults and repair."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from src.domain.entities.stock import DAY_KEYS, Stock, day_key, is_number


@pytest.mark.parametrize(
    "moment, expected",
    [
        (datetime(2026, 10, 11, 0, 0, tzinfo=timezone.utc), "SUN"),
        (datetime(2026, 10, 12, 9, 30, tzinfo=timezone.utc), "MON"),
        (datetime(2026, 10, 15, 23, 59, tzinfo=timezone.utc), "THURS"),
        (datetime(2026, 10, 17, 23, 59, 59, tzinfo=timezone.utc), "SAT"),
    ],
)
def test_day_key_follows_utc_calendar(moment, expected):
    assert day_key(moment) == expected


def test_new_stock_defaults():
    stock = Stock(name="TEST")
    assert stock.price == 100
    assert stock.record == {key: 0 for key in DAY_KEYS}


def test_repair_resets_non_numeric_fields():
    stock = Stock(name="X", price="oops", record={"MON": "5", "TUES": 3, "EXTRA": 1})
    assert stock.repair() is True
    assert stock.price == 100
    assert stock.record == {"SUN": 0, "MON": 0, "TUES": 3, "WED": 0, "THURS": 0, "FRI": 0, "SAT": 0}


def test_repair_replaces_non_mapping_record():
    stock = Stock(name="X", price=42.5, record=None)
    assert stock.repair() is True
    assert stock.price == 42.5
    assert set(stock.record) == set(DAY_KEYS)


def test_repair_is_noop_on_valid_stock():
    stock = Stock(name="X", price=12.0)
    stock.record["FRI"] = 7
    assert stock.repair() is False
    assert stock.record["FRI"] == 7


def test_booleans_are_not_numbers():
    assert is_number(3) and is_number(2.5)
    assert not is_number(True)
    assert not is_number(float("nan"))
    assert not is_number("1")


def test_repair_raises_values_below_floors():
    stock = Stock(name="X", price=-3.0, record={key: 0 for key in DAY_KEYS})
    stock.record["MON"] = -2
    assert stock.repair() is True
    assert stock.price == 0.01
    assert stock.record["MON"] == 0
