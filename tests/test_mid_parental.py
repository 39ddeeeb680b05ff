"""
Tests for mid-parental height, the MPH growth line and target-range checks.
Run: pytest tests/test_mid_parental.py -v
"""
import pytest

from growthcalc.models.errors import InvalidInput, MissingParentData
from growthcalc.models.lms_engine import interpolate
from growthcalc.models.mid_parental import (
    assess_target_range, calculate_mid_parental_height, mph_line,
)
from growthcalc.models.reference_tables import get_table


@pytest.fixture
def boy_mph():
    return calculate_mid_parental_height('male', 165, 180)


class TestMidParentalHeight:

    def test_boys(self, boy_mph):
        assert boy_mph.mph == 179.0
        assert boy_mph.thr_level1_min == 169.0
        assert boy_mph.thr_level1_max == 189.0

    def test_girls(self):
        mph = calculate_mid_parental_height('female', 165, 180)
        assert mph.mph == 166.0
        assert mph.thr_level1_min == 157.5
        assert mph.thr_level1_max == 174.5

    def test_z_scores_against_adult_reference(self, boy_mph):
        # Adult male median is 176.85 cm.
        assert boy_mph.mph_z_score > 0
        assert boy_mph.thr_level1_min_z_score < 0
        assert boy_mph.thr_level1_max_z_score > boy_mph.mph_z_score
        assert boy_mph.thr_level1_min_z_score == pytest.approx(-1.11, abs=0.01)

    def test_level2_reserved(self, boy_mph):
        assert boy_mph.thr_level2_min is None
        assert boy_mph.thr_level2_max_z_score is None

    @pytest.mark.parametrize("mother,father", [(None, 180), (165, None), (0, 180)])
    def test_missing_parent(self, mother, father):
        with pytest.raises(MissingParentData):
            calculate_mid_parental_height('male', mother, father)

    def test_unknown_gender(self):
        with pytest.raises(InvalidInput):
            calculate_mid_parental_height('other', 165, 180)


class TestMPHLine:

    def test_returns_mph_at_adult_age(self, boy_mph):
        (age, line, low, high), = mph_line(boy_mph, 'male', [240])
        assert age == 240
        assert line == pytest.approx(179.0, abs=0.2)
        assert low == pytest.approx(169.0, abs=0.2)
        assert high == pytest.approx(189.0, abs=0.2)

    def test_follows_age_specific_curve(self, boy_mph):
        rows = mph_line(boy_mph, 'male', [24, 60, 120, 240])
        lines = [line for _, line, _, _ in rows]
        assert lines == sorted(lines)
        m_at_60 = interpolate(60, get_table('height_for_age', 'CDC', 'male')).M
        assert rows[1][1] > m_at_60
        for _, line, low, high in rows:
            assert low < line < high

    def test_zero_z_tracks_median(self):
        mph = calculate_mid_parental_height('female', 163.3383, 176.3383)
        assert mph.mph_z_score == 0.0
        _, line, _, _ = mph_line(mph, 'female', [96])[0]
        assert line == pytest.approx(127.6)


class TestTargetRange:

    def test_within(self, boy_mph):
        out = assess_target_range(boy_mph, 'male', 60.0, 110.0)
        assert out.within_range is True
        assert out.min_cm < 110.0 < out.max_cm
        assert 'within the target range' in out.message

    def test_outside(self, boy_mph):
        out = assess_target_range(boy_mph, 'male', 60.0, 130.0)
        assert out.within_range is False
        assert 'pediatric endocrinologist' in out.message
