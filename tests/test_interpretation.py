"""
Tests for percentile band interpretation.
Run: pytest tests/test_interpretation.py -v
"""
import pytest

from growthcalc.models.errors import UnknownReference
from growthcalc.models.interpretation import (
    generate_interpretation, height_band, weight_band,
)


class TestBands:

    @pytest.mark.parametrize("p,band", [
        (0.5, 0), (2.999, 0), (3.0, 1), (9.9, 1), (10, 2), (25, 3),
        (74.9, 3), (75, 4), (90, 5), (97, 6), (99.9, 6),
    ])
    def test_height_lower_edges_inclusive(self, p, band):
        assert height_band(p) == band

    @pytest.mark.parametrize("p,band", [
        (2.999, 0), (3.0, 1), (10, 2), (25, 3), (75, 3), (75.01, 4),
        (90, 4), (97, 5), (97.01, 6),
    ])
    def test_weight_upper_edges_inclusive(self, p, band):
        assert weight_band(p) == band


class TestHeightInterpretation:

    def test_below_third_mentions_z_score(self):
        out = generate_interpretation(1.2, -2.26, 'CDC')
        assert 'below the 3rd percentile' in out.interpretation
        assert '-2.26' in out.interpretation
        assert out.is_normal is False

    def test_three_vs_just_below(self):
        at = generate_interpretation(3.0, -1.88, 'CDC')
        below = generate_interpretation(2.999, -1.8808, 'CDC')
        assert 'short stature' in at.interpretation
        assert at.interpretation != below.interpretation

    def test_short_stature_band_not_normal(self):
        assert generate_interpretation(5.0, -1.64, 'CDC').is_normal is False

    def test_very_tall_still_normal(self):
        out = generate_interpretation(98.5, 2.17, 'CDC')
        assert 'very tall' in out.interpretation
        assert out.is_normal is True

    def test_length_for_infants(self):
        assert "child's length" in generate_interpretation(50.0, 0.0, 'WHO').interpretation
        assert "child's height" in generate_interpretation(50.0, 0.0, 'CDC').interpretation

    def test_percentile_formatting(self):
        out = generate_interpretation(42.0, -0.2, 'CDC')
        assert 'at the 42.0th percentile' in out.interpretation
        assert 'This is considered normal.' in out.interpretation


class TestBandedInterpretation:

    def test_weight_normal_range(self):
        out = generate_interpretation(50.0, 0.0, 'WHO', 'weight_for_age')
        assert out.interpretation.startswith(
            "Your child's weight is between the 25th and 75th percentiles")
        assert out.is_normal is True

    def test_weight_boundaries(self):
        assert generate_interpretation(3.0, -1.88, 'WHO', 'weight_for_age').is_normal
        assert not generate_interpretation(2.999, -1.89, 'WHO', 'weight_for_age').is_normal
        assert generate_interpretation(97.0, 1.88, 'WHO', 'weight_for_age').is_normal
        assert not generate_interpretation(97.01, 1.89, 'WHO', 'weight_for_age').is_normal

    def test_bmi_text(self):
        out = generate_interpretation(95.0, 1.64, 'CDC', 'bmi_for_age')
        assert 'high BMI for age' in out.interpretation
        assert "child's BMI" in out.advice

    def test_weight_for_length_text(self):
        out = generate_interpretation(1.0, -2.33, 'WHO', 'weight_for_length')
        assert 'very low weight for their length' in out.interpretation
        assert out.is_normal is False

    def test_unknown_metric(self):
        with pytest.raises(UnknownReference):
            generate_interpretation(50.0, 0.0, 'WHO', 'head_circumference')
