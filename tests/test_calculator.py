"""
Tests for the end-to-end growth calculator.
Run: pytest tests/test_calculator.py -v
"""
import pytest

from growthcalc.models.calculator import GrowthCalculator, calculate
from growthcalc.models.data_structures import ChildData
from growthcalc.models.errors import InvalidInput, InvalidRange, MissingParentData


@pytest.fixture
def calculator():
    return GrowthCalculator()


def make_child(**overrides):
    data = dict(
        gender='male',
        date_of_birth='2019-03-15',
        measurement_date='2024-03-15',
        height=110.0,
        weight=18.5,
        mother_height=165,
        father_height=180,
        selected_measurements=('height', 'weight', 'bmi'),
    )
    data.update(overrides)
    return ChildData(**data)


class TestCalculate:

    def test_school_age_child(self, calculator):
        out = calculator.calculate(make_child())
        assert out.age.age_years == 5
        assert set(out.results_by_metric) == {
            'height_for_age', 'weight_for_age', 'bmi_for_age'}
        assert all(r.standard == 'CDC' for r in out.results_by_metric.values())
        assert out.growth_result is out.results_by_metric['height_for_age']
        assert out.mid_parental_height.mph == 179.0
        assert out.target_range.within_range is True
        assert out.chart_data == {}

    def test_rounding(self, calculator):
        result = calculator.calculate(make_child()).growth_result
        assert result.z_score == round(result.z_score, 2)
        assert result.percentile == round(result.percentile, 1)
        assert 0 <= result.percentile <= 100

    def test_infant_uses_weight_for_length(self, calculator):
        child = make_child(date_of_birth='2024-01-01', measurement_date='2024-07-01',
                           height=67.0, weight=8.0)
        out = calculator.calculate(child)
        assert 'weight_for_length' in out.results_by_metric
        assert 'bmi_for_age' not in out.results_by_metric
        assert out.results_by_metric['height_for_age'].standard == 'WHO'
        assert out.target_range is None

    def test_imperial_matches_metric(self, calculator):
        metric = calculator.calculate(make_child())
        imperial = calculator.calculate(make_child(
            height=110.0 / 2.54, height_unit='inches',
            weight=18.5 / 0.45359237, weight_unit='lb',
            mother_height=165 / 2.54, mother_height_unit='inches',
            father_height=180 / 2.54, father_height_unit='inches'))
        assert imperial.growth_result.z_score == metric.growth_result.z_score
        assert imperial.mid_parental_height.mph == metric.mid_parental_height.mph

    def test_weight_only_without_parents(self, calculator):
        child = make_child(selected_measurements=('weight',), height=None,
                           mother_height=None, father_height=None)
        out = calculator.calculate(child)
        assert out.growth_result.metric == 'weight_for_age'
        assert out.mid_parental_height is None

    def test_empty_selection_defaults_to_height(self, calculator):
        out = calculator.calculate(make_child(selected_measurements=()))
        assert list(out.results_by_metric) == ['height_for_age']

    def test_missing_parents_for_height(self, calculator):
        with pytest.raises(MissingParentData):
            calculator.calculate(make_child(father_height=None))

    def test_adopted_skips_mid_parental(self, calculator):
        out = calculator.calculate(make_child(
            mother_height=None, father_height=None, is_adopted=True))
        assert out.mid_parental_height is None
        assert out.target_range is None

    def test_missing_measurement(self, calculator):
        with pytest.raises(InvalidInput):
            calculator.calculate(make_child(height=None))

    def test_age_limit(self, calculator):
        adult = make_child(date_of_birth='2000-01-01')
        with pytest.raises(InvalidRange):
            calculator.calculate(adult, max_age_months=240)
        assert calculator.calculate(make_child(), max_age_months=240).age.age_years == 5

    def test_unknown_measurement(self, calculator):
        with pytest.raises(InvalidInput):
            calculator.calculate(make_child(selected_measurements=('head',)))


class TestCharts:

    def test_charts_follow_results(self):
        out = calculate(make_child(), include_charts=True)
        assert set(out.chart_data) == set(out.results_by_metric)
        height = out.chart_data['height_for_age']
        assert height[0].mph_line is not None
        assert out.chart_data['weight_for_age'][0].mph_line is None

    def test_to_dict(self):
        data = calculate(make_child(), include_charts=True).to_dict()
        assert data['age']['age_in_days'] == 1827
        assert data['child_data']['gender'] == 'male'
        assert isinstance(data['chart_data']['bmi_for_age'][0], dict)
