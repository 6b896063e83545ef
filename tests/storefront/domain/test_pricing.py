"""Tests for the order pricing calculator."""

import pytest

from storefront.order.pricing import (
    DEFAULT_TAX_RATE,
    calculate_totals,
    line_total,
    to_money,
    within_tolerance,
)


class TestCalculateTotals:
    def test_subtotal_tax_and_total(self):
        totals = calculate_totals(
            [{"unit_price": 500.0, "quantity": 2}, {"unit_price": 950.0, "quantity": 1}],
            shipping_cost=200.0,
        )
        assert totals.subtotal == 1950.0
        assert totals.tax == 312.0
        assert totals.shipping_cost == 200.0
        assert totals.total == 2462.0

    def test_default_tax_rate_is_sixteen_percent(self):
        assert DEFAULT_TAX_RATE == 0.16
        totals = calculate_totals([{"unit_price": 1000.0, "quantity": 1}])
        assert totals.tax == 160.0

    def test_custom_tax_rate(self):
        totals = calculate_totals([{"unit_price": 1000.0, "quantity": 1}], tax_rate=0.08)
        assert totals.tax == 80.0
        assert totals.total == 1080.0

    def test_tax_rounds_half_up_to_cents(self):
        totals = calculate_totals([{"unit_price": 333.33, "quantity": 3}])
        assert totals.subtotal == 999.99
        # 999.99 * 0.16 = 159.9984
        assert totals.tax == 160.0
        assert totals.total == 1159.99

    def test_float_noise_does_not_leak_into_totals(self):
        totals = calculate_totals([{"unit_price": 0.1, "quantity": 3}], tax_rate=0.0)
        assert totals.subtotal == 0.3

    def test_accepts_objects_with_price_attributes(self):
        class Line:
            unit_price = 250.0
            quantity = 4

        totals = calculate_totals([Line()], shipping_cost=0.0)
        assert totals.subtotal == 1000.0

    def test_total_identity_holds(self):
        totals = calculate_totals(
            [{"unit_price": 123.45, "quantity": 7}, {"unit_price": 9.99, "quantity": 11}],
            shipping_cost=500.0,
        )
        assert abs(totals.subtotal + totals.shipping_cost + totals.tax - totals.total) <= 0.01

    def test_empty_cart_prices_to_shipping_only(self):
        totals = calculate_totals([], shipping_cost=200.0)
        assert totals.subtotal == 0.0
        assert totals.tax == 0.0
        assert totals.total == 200.0


class TestLineTotal:
    def test_multiplies_price_by_quantity(self):
        assert line_total(500.0, 2) == 1000.0

    def test_rounds_to_cents(self):
        assert line_total(19.999, 1) == 20.0


class TestWithinTolerance:
    @pytest.mark.parametrize(
        "submitted, expected",
        [
            (1360.0, True),
            (1360.99, True),
            (1361.0, True),
            (1359.0, True),
            (1361.01, False),
            (1358.5, False),
        ],
    )
    def test_one_unit_tolerance(self, submitted, expected):
        assert within_tolerance(1360.0, submitted) is expected

    def test_custom_tolerance(self):
        assert within_tolerance(100.0, 100.4, tolerance=0.5)
        assert not within_tolerance(100.0, 100.6, tolerance=0.5)


def test_to_money_quantizes_half_up():
    assert str(to_money(2.675)) == "2.68"
    assert str(to_money(None)) == "0.00"
