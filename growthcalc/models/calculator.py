"""
Growth calculator: runs a child's raw input through the whole pipeline.

- Age and unit normalisation
- WHO/CDC table selection and LMS interpolation
- Z-score, percentile and interpretation per selected measurement
- Mid-parental height and target-range check
- Optional percentile chart data
"""
import logging
from typing import Dict, Optional

from growthcalc.models.age import calculate_age
from growthcalc.models.chart_data import (
    bmi_chart, height_chart, weight_chart, weight_for_length_chart,
)
from growthcalc.models.data_structures import (
    CalculationResults, ChildData, GrowthResult, MidParentalHeight,
)
from growthcalc.models.errors import InvalidInput, InvalidRange, MissingParentData
from growthcalc.models.interpretation import generate_interpretation
from growthcalc.models.lms_engine import LMSEngine
from growthcalc.models.mid_parental import (
    assess_target_range, calculate_mid_parental_height,
)
from growthcalc.models.reference_tables import select_standard
from growthcalc.models.units import calculate_bmi, convert_height, convert_weight

logger = logging.getLogger(__name__)


class GrowthCalculator:
    """Stateless calculator; a single instance can serve concurrent callers."""

    def __init__(self, engine: LMSEngine = None):
        self.engine = engine or LMSEngine()

    def _result(self, metric: str, sex: str, x: float, value: float,
                standard: str = None) -> GrowthResult:
        standard = standard or self.engine.standard_for(metric, x)
        z = self.engine.compute_zscore(metric, sex, x, value, standard)
        pct = self.engine.zscore_to_percentile(z)
        text = generate_interpretation(pct, z, standard, metric)
        return GrowthResult(
            z_score=round(z, 2),
            percentile=round(pct, 1),
            standard=standard,
            interpretation=text.interpretation,
            advice=text.advice,
            is_normal=text.is_normal,
            metric=metric,
        )

    def height_result(self, sex: str, height_cm: float,
                      age_in_months: float) -> GrowthResult:
        return self._result('height_for_age', sex, age_in_months, height_cm)

    def weight_result(self, sex: str, weight_kg: float,
                      age_in_months: float) -> GrowthResult:
        return self._result('weight_for_age', sex, age_in_months, weight_kg)

    def bmi_result(self, sex: str, bmi: float, age_in_months: float) -> GrowthResult:
        return self._result('bmi_for_age', sex, age_in_months, bmi)

    def weight_for_length_result(self, sex: str, weight_kg: float,
                                 length_cm: float) -> GrowthResult:
        return self._result('weight_for_length', sex, length_cm, weight_kg, 'WHO')

    def body_proportion_result(self, sex: str, weight_kg: float, height_cm: float,
                               age_in_months: float) -> GrowthResult:
        """Weight-for-length up to 24 months, BMI-for-age after."""
        if select_standard(age_in_months) == 'WHO':
            return self.weight_for_length_result(sex, weight_kg, height_cm)
        return self.bmi_result(sex, calculate_bmi(weight_kg, height_cm), age_in_months)

    def mid_parental_height(self, child: ChildData) -> Optional[MidParentalHeight]:
        selected = set(child.selected_measurements)
        has_parents = bool(child.mother_height) and bool(child.father_height)
        if not has_parents:
            if child.is_adopted or not selected & {'height', 'bmi'}:
                return None
            raise MissingParentData("Both parental heights are required")

        return calculate_mid_parental_height(
            child.gender,
            convert_height(child.mother_height, child.mother_height_unit, 'cm'),
            convert_height(child.father_height, child.father_height_unit, 'cm'),
        )

    def calculate(self, child: ChildData, include_charts: bool = False,
                  max_age_months: Optional[float] = None) -> CalculationResults:
        """Run the full pipeline for one child.

        With `max_age_months` set, older children are rejected with
        `InvalidRange` instead of being scored against the clamped table edge.
        """
        age = calculate_age(child.date_of_birth, child.measurement_date)
        if max_age_months is not None and age.age_in_months > max_age_months:
            raise InvalidRange(
                f"Age {age.age_in_months:.1f} months is beyond the supported "
                f"{max_age_months:g} months (0-20 years)"
            )
        selected = tuple(child.selected_measurements) or ('height',)
        months = age.age_in_months

        height_cm = weight_kg = None
        if child.height:
            height_cm = convert_height(child.height, child.height_unit, 'cm')
        if child.weight:
            weight_kg = convert_weight(child.weight, child.weight_unit, 'kg')

        results: Dict[str, GrowthResult] = {}
        for measurement in selected:
            if measurement == 'height':
                if height_cm is None:
                    raise InvalidInput("Height is required for the height measurement")
                results['height_for_age'] = self.height_result(child.gender, height_cm, months)
            elif measurement == 'weight':
                if weight_kg is None:
                    raise InvalidInput("Weight is required for the weight measurement")
                results['weight_for_age'] = self.weight_result(child.gender, weight_kg, months)
            elif measurement == 'bmi':
                if height_cm is None or weight_kg is None:
                    raise InvalidInput("Height and weight are both required for BMI")
                result = self.body_proportion_result(child.gender, weight_kg, height_cm, months)
                results[result.metric] = result
            else:
                raise InvalidInput(f"Unknown measurement: {measurement!r}")

        mph = self.mid_parental_height(child)
        target_range = None
        if mph is not None and height_cm is not None and select_standard(months) == 'CDC':
            target_range = assess_target_range(mph, child.gender, months, height_cm)

        growth_result = results.get('height_for_age') or next(iter(results.values()), None)
        logger.debug("Calculated %s for %s aged %.2f months",
                     sorted(results), child.gender, months)

        out = CalculationResults(
            child_data=child,
            age=age,
            growth_result=growth_result,
            mid_parental_height=mph,
            results_by_metric=results,
            target_range=target_range,
        )
        if include_charts:
            out.chart_data = self.charts(child.gender, months, results, mph)
        return out

    @staticmethod
    def charts(sex: str, age_in_months: float, results: Dict[str, GrowthResult],
               mph: Optional[MidParentalHeight] = None) -> dict:
        builders = {
            'height_for_age': lambda: height_chart(sex, age_in_months, mph),
            'weight_for_age': lambda: weight_chart(sex, age_in_months),
            'bmi_for_age': lambda: bmi_chart(sex, age_in_months),
            'weight_for_length': lambda: weight_for_length_chart(sex),
        }
        return {metric: builders[metric]() for metric in results}


def calculate(child: ChildData, include_charts: bool = False) -> CalculationResults:
    return GrowthCalculator().calculate(child, include_charts)
