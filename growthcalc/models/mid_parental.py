"""
Mid-parental height (MPH) and target height range.

Boys:  MPH = (mother + father + 13) / 2, target range MPH ± 10 cm
Girls: MPH = (mother + father - 13) / 2, target range MPH ± 8.5 cm

The three heights are scored against the CDC stature table at 20 years,
whatever the child's age. The MPH growth line then re-evaluates those fixed
z-scores against each age's own (L, M, S).
"""
import logging
from typing import Iterable, List, Optional, Tuple

from config.settings import ADULT_REFERENCE_AGE_MONTHS
from growthcalc.models.data_structures import MidParentalHeight, TargetRangeAssessment
from growthcalc.models.errors import InvalidInput, MissingParentData
from growthcalc.models.lms_engine import interpolate, value_at_z, z_score
from growthcalc.models.reference_tables import get_table

logger = logging.getLogger(__name__)

SEX_ADJUSTMENT_CM = 13.0
TARGET_HALF_RANGE_CM = {'male': 10.0, 'female': 8.5}


def _require_height(value: Optional[float], parent: str) -> float:
    if value is None or value <= 0:
        raise MissingParentData(f"{parent.capitalize()}'s height is required")
    return float(value)


def calculate_mid_parental_height(gender: str, mother_height_cm: Optional[float],
                                  father_height_cm: Optional[float]) -> MidParentalHeight:
    if gender not in TARGET_HALF_RANGE_CM:
        raise InvalidInput(f"Unknown gender: {gender!r}")
    mother = _require_height(mother_height_cm, 'mother')
    father = _require_height(father_height_cm, 'father')

    if gender == 'male':
        mph = (mother + father + SEX_ADJUSTMENT_CM) / 2
    else:
        mph = (mother + father - SEX_ADJUSTMENT_CM) / 2
    half_range = TARGET_HALF_RANGE_CM[gender]
    thr_min, thr_max = mph - half_range, mph + half_range

    adult = interpolate(ADULT_REFERENCE_AGE_MONTHS,
                        get_table('height_for_age', 'CDC', gender))

    return MidParentalHeight(
        mph=round(mph, 1),
        thr_level1_min=round(thr_min, 1),
        thr_level1_max=round(thr_max, 1),
        mph_z_score=round(z_score(mph, adult.L, adult.M, adult.S), 2),
        thr_level1_min_z_score=round(z_score(thr_min, adult.L, adult.M, adult.S), 2),
        thr_level1_max_z_score=round(z_score(thr_max, adult.L, adult.M, adult.S), 2),
    )


def mph_line(mph: MidParentalHeight, gender: str,
             ages_months: Iterable[float]) -> List[Tuple[float, float, float, float]]:
    """(age, mph height, range min, range max) at each age on the CDC curve."""
    table = get_table('height_for_age', 'CDC', gender)
    points = []
    for age in ages_months:
        lms = interpolate(age, table)
        points.append((
            age,
            value_at_z(mph.mph_z_score, lms.L, lms.M, lms.S),
            value_at_z(mph.thr_level1_min_z_score, lms.L, lms.M, lms.S),
            value_at_z(mph.thr_level1_max_z_score, lms.L, lms.M, lms.S),
        ))
    return points


def assess_target_range(mph: MidParentalHeight, gender: str, age_in_months: float,
                        height_cm: float) -> TargetRangeAssessment:
    """Check the child's height against the target range projected to their age."""
    _, _, low, high = mph_line(mph, gender, [age_in_months])[0]
    within = low <= height_cm <= high
    logger.debug("Target range at %.2f mo: %.1f-%.1f cm, height %.1f cm",
                 age_in_months, low, high, height_cm)
    if within:
        message = "Your child's height is within the target range - normal."
    else:
        message = ("Your child's height is outside the target height range - "
                   "recommended to see a pediatrician or pediatric endocrinologist.")
    return TargetRangeAssessment(min_cm=low, max_cm=high, within_range=within,
                                 message=message)
