"""
LMS (Lambda-Mu-Sigma) z-score computation engine.

Z-score = ((value/M)^L - 1) / (L * S)  when L != 0
Z-score = ln(value/M) / S              when L == 0

Percentile = 100 * Phi(Z), with Phi evaluated by the Abramowitz-Stegun
rational approximation (formula 7.1.26, |error| < 1.5e-7).
"""
import logging
import math
from operator import attrgetter
from typing import Sequence

import numpy as np
from scipy.interpolate import interp1d

from growthcalc.models.data_structures import LMSPoint
from growthcalc.models.errors import EmptyTable, InvalidInput, NegativeQuery
from growthcalc.models.reference_tables import (
    available_metrics, get_table, select_standard,
)

logger = logging.getLogger(__name__)

# Abramowitz & Stegun 7.1.26
_A1 = 0.254829592
_A2 = -0.284496736
_A3 = 1.421413741
_A4 = -1.453152027
_A5 = 1.061405429
_P = 0.3275911

# Exact standard normal quantiles for the charted percentile curves.
FIXED_PERCENTILE_Z = {
    3: -1.8807936081512509,
    10: -1.2815515655446004,
    25: -0.6744897501960817,
    50: 0.0,
    75: 0.6744897501960817,
    90: 1.2815515655446004,
    97: 1.8807936081512509,
}
CHART_PERCENTILES = tuple(sorted(FIXED_PERCENTILE_Z))


def interpolate(x: float, table: Sequence[LMSPoint]) -> LMSPoint:
    """Resolve (L, M, S) at `x` by linear interpolation between table knots.

    Exact knot matches are returned unmodified. Queries outside the table
    domain clamp to the nearest endpoint; nothing is extrapolated.
    """
    if not table:
        raise EmptyTable("LMS table is empty")
    if x < 0:
        raise NegativeQuery(f"Query point cannot be negative: {x}")
    if not math.isfinite(x):
        raise InvalidInput(f"Query point must be finite: {x}")

    for point in table:
        if point.x == x:
            return point

    points = sorted({p.x: p for p in table}.values(), key=attrgetter('x'))
    if x < points[0].x:
        logger.debug("x=%s below table minimum %s; clamping", x, points[0].x)
        return points[0]
    if x > points[-1].x:
        logger.debug("x=%s above table maximum %s; clamping", x, points[-1].x)
        return points[-1]

    xs = np.array([p.x for p in points], dtype=float)
    lms = np.array([(p.L, p.M, p.S) for p in points], dtype=float)
    L, M, S = interp1d(xs, lms, axis=0, kind='linear', assume_sorted=True)(x)
    return LMSPoint(x=x, L=float(L), M=float(M), S=float(S))


def z_score(measurement: float, L: float, M: float, S: float) -> float:
    if not all(math.isfinite(v) for v in (measurement, L, M, S)):
        raise InvalidInput("Measurement and LMS values must be finite numbers")
    if measurement <= 0 or M <= 0 or S <= 0:
        raise InvalidInput("Measurement, M, and S values must be positive")
    if L != 0:
        return ((measurement / M) ** L - 1) / (L * S)
    return math.log(measurement / M) / S


def percentile_from_z(z: float) -> float:
    if math.isnan(z):
        raise InvalidInput("Z-score is not a number")
    sign = 1.0 if z >= 0 else -1.0
    x = abs(z) / math.sqrt(2.0)

    t = 1.0 / (1.0 + _P * x)
    y = 1.0 - (((((_A5 * t + _A4) * t) + _A3) * t + _A2) * t + _A1) * t * math.exp(-x * x)

    result = 0.5 * (1.0 + sign * y)
    if not 0.0 <= result <= 1.0:
        logger.debug("CDF approximation %.10f out of [0, 1] at z=%s; clamping", result, z)
    return max(0.0, min(1.0, result)) * 100


def z_for_percentile(percentile: float) -> float:
    """Z-score for one of the charted percentiles.

    Anything outside the fixed set falls back to the nearest supported
    percentile (ties resolve towards the median first, then the lower one).
    """
    if percentile in FIXED_PERCENTILE_Z:
        return FIXED_PERCENTILE_Z[percentile]
    nearest = min((50,) + CHART_PERCENTILES, key=lambda p: abs(p - percentile))
    logger.debug("Percentile %s not charted; using P%s", percentile, nearest)
    return FIXED_PERCENTILE_Z[nearest]


def value_at_z(z: float, L: float, M: float, S: float) -> float:
    """Inverse LMS transform: the measurement that sits at `z`."""
    if L != 0:
        inner = 1 + L * S * z
        if inner <= 0:
            raise InvalidInput(f"Z-score {z} is outside the LMS domain (L={L}, S={S})")
        return M * inner ** (1.0 / L)
    return M * math.exp(S * z)


class LMSEngine:
    """Table-driven LMS engine over the WHO/CDC reference tables."""

    def __init__(self, table_lookup=get_table):
        self._get_table = table_lookup

    @staticmethod
    def standard_for(metric: str, x: float) -> str:
        if metric == 'weight_for_length':
            return 'WHO'
        return select_standard(x)

    def lookup(self, metric: str, sex: str, x: float,
               standard: str = None) -> LMSPoint:
        standard = standard or self.standard_for(metric, x)
        return interpolate(x, self._get_table(metric, standard, sex))

    def compute_zscore(self, metric: str, sex: str, x: float,
                       value: float, standard: str = None) -> float:
        lms = self.lookup(metric, sex, x, standard)
        return z_score(value, lms.L, lms.M, lms.S)

    def zscore_to_percentile(self, z: float) -> float:
        return percentile_from_z(z)

    def zscore_to_value(self, metric: str, sex: str, x: float,
                        z: float, standard: str = None) -> float:
        lms = self.lookup(metric, sex, x, standard)
        return value_at_z(z, lms.L, lms.M, lms.S)

    def get_percentile_value(self, metric: str, sex: str, x: float,
                             percentile: float, standard: str = None) -> float:
        return self.zscore_to_value(
            metric, sex, x, z_for_percentile(percentile), standard
        )

    def get_median(self, metric: str, sex: str, x: float,
                   standard: str = None) -> float:
        return self.lookup(metric, sex, x, standard).M

    @property
    def available_metrics(self) -> list:
        return available_metrics()
