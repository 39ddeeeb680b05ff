"""
Tests for unit conversion and age calculation.
Run: pytest tests/test_units_age.py -v
"""
from datetime import date

import pytest

from growthcalc.models.age import calculate_age, parse_date
from growthcalc.models.errors import InvalidDate, InvalidInput, InvalidRange
from growthcalc.models.units import calculate_bmi, convert_height, convert_weight


class TestUnitConversion:

    def test_identity(self):
        assert convert_height(100.0, 'cm', 'cm') == 100.0
        assert convert_weight(12.5, 'lb', 'lb') == 12.5

    def test_inches_to_cm(self):
        assert convert_height(10, 'inches', 'cm') == pytest.approx(25.4)

    def test_pounds_to_kg(self):
        assert convert_weight(10, 'lb', 'kg') == pytest.approx(4.5359237)

    @pytest.mark.parametrize("v", [0.0, 0.3, 49.9, 180.0])
    def test_round_trip(self, v):
        assert convert_height(convert_height(v, 'cm', 'inches'), 'inches', 'cm') == \
            pytest.approx(v, abs=1e-9)
        assert convert_weight(convert_weight(v, 'kg', 'lb'), 'lb', 'kg') == \
            pytest.approx(v, abs=1e-9)

    def test_negative_rejected(self):
        with pytest.raises(InvalidInput):
            convert_height(-1, 'cm', 'inches')
        with pytest.raises(InvalidInput):
            convert_weight(-0.5, 'kg', 'kg')

    def test_unknown_unit(self):
        with pytest.raises(InvalidInput):
            convert_height(10, 'cm', 'feet')

    def test_bmi(self):
        assert calculate_bmi(20, 110) == pytest.approx(16.53)

    def test_bmi_rejects_zero(self):
        with pytest.raises(InvalidInput):
            calculate_bmi(0, 110)


class TestAge:

    def test_two_years(self):
        age = calculate_age('2020-01-01', '2022-01-01')
        assert age.age_in_days == 731
        assert age.age_in_months == pytest.approx(24.01, abs=0.01)
        assert age.age_years == 2
        assert age.age_months == 0

    def test_same_day(self):
        age = calculate_age('2023-05-05', '2023-05-05')
        assert age.age_in_days == 0
        assert age.age_in_months == 0.0

    def test_display_months(self):
        age = calculate_age('2020-01-15', '2021-08-01')
        assert age.age_years == 1
        assert age.age_months == 6
        assert 18 < age.age_in_months < 19

    def test_accepts_date_objects(self):
        age = calculate_age(date(2021, 3, 1), '2021-09-01T10:30:00')
        assert age.age_in_days == 184

    def test_measurement_before_birth(self):
        with pytest.raises(InvalidRange):
            calculate_age('2022-01-01', '2020-01-01')

    @pytest.mark.parametrize("bad", [
        "", "2021-13-01", "yesterday", None,
        "2020-01-01garbage", "2020-01-01 not a date", "2020-01-01T99:99",
    ])
    def test_invalid_date(self, bad):
        with pytest.raises(InvalidDate):
            calculate_age(bad, '2022-01-01')

    def test_parse_date(self):
        assert parse_date(' 2020-02-29 ') == date(2020, 2, 29)
