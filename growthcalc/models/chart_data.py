"""
Percentile curve generation for growth charts.

Each chart point carries the 3rd-97th percentile curves evaluated with the
fixed z-values at that point's own (L, M, S). Rendering is left to the caller.
"""
from dataclasses import asdict
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from config.settings import (
    CHART_CDC_RANGE, CHART_STEP_MONTHS, CHART_WHO_RANGE,
    MPH_LINE_START_MONTHS, WFL_CHART_RANGE, WFL_CHART_STEP_CM,
)
from growthcalc.models.data_structures import ChartPoint, LMSPoint, MidParentalHeight
from growthcalc.models.lms_engine import (
    CHART_PERCENTILES, interpolate, value_at_z, z_for_percentile,
)
from growthcalc.models.mid_parental import mph_line
from growthcalc.models.reference_tables import get_table, select_standard


def _grid(start: float, end: float, step: float) -> List[float]:
    return [float(x) for x in np.arange(start, end + step / 2, step)]


def chart_window(age_in_months: float):
    """(standard, start, end) of the age axis shown for a child of this age."""
    standard = select_standard(age_in_months)
    start, end = CHART_WHO_RANGE if standard == 'WHO' else CHART_CDC_RANGE
    return standard, start, end


def _age_label(age_months: float, standard: str) -> str:
    if standard == 'CDC':
        years = age_months / 12
        return str(round(years)) if abs(years - round(years)) < 1e-6 else ''
    return str(round(age_months))


def _curves(lms: LMSPoint) -> dict:
    return {
        f'percentile{p}': value_at_z(z_for_percentile(p), lms.L, lms.M, lms.S)
        for p in CHART_PERCENTILES
    }


def percentile_points(metric: str, gender: str, standard: str,
                      xs: Sequence[float], labels: Sequence[str]) -> List[ChartPoint]:
    table = get_table(metric, standard, gender)
    return [
        ChartPoint(x=float(x), label=label, **_curves(interpolate(float(x), table)))
        for x, label in zip(xs, labels)
    ]


def age_chart(metric: str, gender: str, age_in_months: float) -> List[ChartPoint]:
    standard, start, end = chart_window(age_in_months)
    ages = _grid(start, end, CHART_STEP_MONTHS)
    labels = [_age_label(a, standard) for a in ages]
    return percentile_points(metric, gender, standard, ages, labels)


def height_chart(gender: str, age_in_months: float,
                 mid_parental_height: Optional[MidParentalHeight] = None) -> List[ChartPoint]:
    points = age_chart('height_for_age', gender, age_in_months)
    if mid_parental_height is None or select_standard(age_in_months) == 'WHO':
        return points

    ages = [p.x for p in points if p.x >= MPH_LINE_START_MONTHS]
    by_age = {age: rest for age, *rest in mph_line(mid_parental_height, gender, ages)}
    out = []
    for point in points:
        if point.x in by_age:
            line, low, high = by_age[point.x]
            point = ChartPoint(**{**asdict(point), 'mph_line': line,
                                  'thr_level1_min': low, 'thr_level1_max': high})
        out.append(point)
    return out


def weight_chart(gender: str, age_in_months: float) -> List[ChartPoint]:
    return age_chart('weight_for_age', gender, age_in_months)


def bmi_chart(gender: str, age_in_months: float) -> List[ChartPoint]:
    return age_chart('bmi_for_age', gender, age_in_months)


def weight_for_length_chart(gender: str) -> List[ChartPoint]:
    lengths = _grid(WFL_CHART_RANGE[0], WFL_CHART_RANGE[1], WFL_CHART_STEP_CM)
    labels = [f"{length:g}" for length in lengths]
    return percentile_points('weight_for_length', gender, 'WHO', lengths, labels)


def chart_frame(points: Sequence[ChartPoint]) -> pd.DataFrame:
    """Chart points as a DataFrame indexed by x."""
    df = pd.DataFrame([asdict(p) for p in points])
    if df.empty:
        return df
    return df.set_index('x')
