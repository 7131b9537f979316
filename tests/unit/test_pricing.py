"""
Unit tests for the shared discount arithmetic.
"""

import pytest
from datetime import timedelta
from decimal import Decimal

from marketplace.services.pricing import (
    compute_discount_amount, apply_discount, in_time_window, is_applicable
)
from marketplace.utils.money import to_decimal
from fakes import make_discount, NOW


class TestComputeDiscountAmount:
    """Amount per discount type."""

    @pytest.mark.parametrize('price,value,cap,expected', [
        (Decimal('100'), Decimal('10'), Decimal('5'), Decimal('5')),
        (Decimal('100'), Decimal('10'), Decimal('50'), Decimal('10')),
        (Decimal('80'), Decimal('25'), None, Decimal('20')),
        (Decimal('0'), Decimal('50'), None, Decimal('0')),
    ])
    def test_percentage_is_capped(self, price, value, cap, expected):
        amount = compute_discount_amount(price, 'percentage', value, cap)
        assert amount == expected
        assert apply_discount(price, amount) >= 0

    def test_fixed_amount_never_exceeds_price(self):
        amount = compute_discount_amount(Decimal('30'), 'fixed_amount', Decimal('45'))
        assert amount == Decimal('30')
        assert apply_discount(Decimal('30'), amount) == 0

    def test_fixed_amount_below_price(self):
        assert compute_discount_amount(Decimal('30'), 'fixed_amount', Decimal('8')) == Decimal('8')

    def test_free_shipping_does_not_reduce_price(self):
        assert compute_discount_amount(Decimal('99'), 'free_shipping', Decimal('100')) == 0

    def test_accepts_plain_numbers(self):
        assert compute_discount_amount(50, 'percentage', 20) == Decimal('10')

    def test_apply_discount_floors_at_zero(self):
        assert apply_discount(Decimal('10'), Decimal('15')) == 0


class TestApplicability:
    """Active flag, status and time window."""

    def test_open_ended_discount_is_applicable(self):
        assert is_applicable(make_discount(end_date=None), NOW) is True

    def test_past_end_date_is_never_applicable(self):
        discount = make_discount(end_date=NOW - timedelta(seconds=1), is_global=True)
        assert is_applicable(discount, NOW) is False

    def test_future_start_is_not_applicable(self):
        assert is_applicable(make_discount(start_date=NOW + timedelta(hours=1)), NOW) is False

    def test_window_bounds_are_inclusive(self):
        assert in_time_window(NOW, NOW, NOW) is True

    def test_inactive_flag_blocks(self):
        assert is_applicable(make_discount(is_active=False), NOW) is False

    def test_non_active_status_blocks(self):
        assert is_applicable(make_discount(status='inactive'), NOW) is False


class TestToDecimal:

    def test_parses_numbers_and_strings(self):
        assert to_decimal(None) == Decimal('0')
        assert to_decimal(0.1) == Decimal('0.1')
        assert to_decimal(' 12.50 ') == Decimal('12.50')

    @pytest.mark.parametrize('value', ['NaN', 'nan', 'sNaN', 'Infinity', '-Infinity',
                                       float('inf'), Decimal('NaN'), 'abc'])
    def test_rejects_non_numeric_and_non_finite(self, value):
        with pytest.raises(ValueError):
            to_decimal(value)
