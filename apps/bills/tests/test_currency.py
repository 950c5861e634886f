from decimal import Decimal

import pytest

from apps.bills.services import format_rupiah, parse_rupiah, to_money


class TestFormatRupiah:

    @pytest.mark.parametrize('amount, expected', [
        (Decimal('0'), 'Rp 0'),
        (Decimal('500'), 'Rp 500'),
        (Decimal('40000'), 'Rp 40.000'),
        (Decimal('1234567'), 'Rp 1.234.567'),
        (Decimal('33333.5'), 'Rp 33.334'),
        (Decimal('33333.49'), 'Rp 33.333'),
        (Decimal('-1500.5'), '-Rp 1.501'),
    ])
    def test_format(self, amount, expected):
        assert format_rupiah(amount) == expected

    def test_accepts_int(self):
        assert format_rupiah(66000) == 'Rp 66.000'


class TestParseRupiah:

    @pytest.mark.parametrize('text, expected', [
        ('Rp 40.000', Decimal('40000')),
        ('rp40.000', Decimal('40000')),
        ('Rp. 1.234.567', Decimal('1234567')),
        ('6000', Decimal('6000')),
        ('12.500,50', Decimal('12500.50')),
        ('2500,5', Decimal('2500.5')),
        ('-Rp 1.000', Decimal('-1000')),
        ('  7.000  ', Decimal('7000')),
    ])
    def test_parses_formatted_text(self, text, expected):
        assert parse_rupiah(text) == expected

    @pytest.mark.parametrize('text', ['', '   ', 'abc', 'Rp', '1.5', '12,34,56', None, True])
    def test_unparseable_is_zero(self, text):
        assert parse_rupiah(text) == Decimal('0')

    def test_numbers_are_taken_as_is(self):
        assert parse_rupiah(2500) == Decimal('2500')
        assert parse_rupiah(Decimal('12.5')) == Decimal('12.5')
        assert parse_rupiah(1.5) == Decimal('1.5')
        assert parse_rupiah(float('nan')) == Decimal('0')

    def test_reads_back_formatted_output(self):
        assert parse_rupiah(format_rupiah(Decimal('1234567'))) == Decimal('1234567')


class TestToMoney:

    def test_rounds_half_up_to_cents(self):
        assert to_money(Decimal('10000') / 3) == Decimal('3333.33')
        assert to_money(Decimal('0.005')) == Decimal('0.01')
        assert to_money(Decimal('20000')) == Decimal('20000.00')
