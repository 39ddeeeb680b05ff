"""
Data structures for the Pediatric Growth Percentile Engine.

All of these are value objects: built fresh per calculation, owned by the
caller, and never mutated by the engine afterwards.
"""
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional

METRICS = ('height_for_age', 'weight_for_age', 'bmi_for_age', 'weight_for_length')
STANDARDS = ('WHO', 'CDC')
GENDERS = ('male', 'female')
HEIGHT_UNITS = ('cm', 'inches')
WEIGHT_UNITS = ('kg', 'lb')
MEASUREMENTS = ('height', 'weight', 'bmi')


@dataclass(frozen=True)
class LMSPoint:
    x: float  # age in months, or length in cm for weight_for_length
    L: float
    M: float
    S: float


@dataclass(frozen=True)
class AgeCalculation:
    age_years: int
    age_months: int        # 0-11, display only
    age_in_months: float   # authoritative value for table lookups
    age_in_days: int


@dataclass(frozen=True)
class GrowthResult:
    z_score: float
    percentile: float
    standard: str
    interpretation: str
    advice: str
    is_normal: bool
    metric: str = 'height_for_age'


@dataclass(frozen=True)
class MidParentalHeight:
    mph: float
    thr_level1_min: float
    thr_level1_max: float
    mph_z_score: float
    thr_level1_min_z_score: float
    thr_level1_max_z_score: float
    # Reserved; never populated.
    thr_level2_min: Optional[float] = None
    thr_level2_max: Optional[float] = None
    thr_level2_min_z_score: Optional[float] = None
    thr_level2_max_z_score: Optional[float] = None


@dataclass(frozen=True)
class TargetRangeAssessment:
    min_cm: float
    max_cm: float
    within_range: bool
    message: str


@dataclass(frozen=True)
class ChartPoint:
    x: float        # age in months, or length in cm
    label: str
    percentile3: float
    percentile10: float
    percentile25: float
    percentile50: float
    percentile75: float
    percentile90: float
    percentile97: float
    mph_line: Optional[float] = None
    thr_level1_min: Optional[float] = None
    thr_level1_max: Optional[float] = None


@dataclass(frozen=True)
class ChildData:
    gender: str
    date_of_birth: str
    measurement_date: str
    height: Optional[float] = None
    height_unit: str = 'cm'
    weight: Optional[float] = None
    weight_unit: str = 'kg'
    mother_height: Optional[float] = None
    father_height: Optional[float] = None
    mother_height_unit: str = 'cm'
    father_height_unit: str = 'cm'
    selected_measurements: tuple = ('height',)
    is_adopted: bool = False


@dataclass
class CalculationResults:
    child_data: ChildData
    age: AgeCalculation
    growth_result: Optional[GrowthResult]
    mid_parental_height: Optional[MidParentalHeight]
    results_by_metric: Dict[str, GrowthResult] = field(default_factory=dict)
    target_range: Optional[TargetRangeAssessment] = None
    chart_data: Dict[str, List[ChartPoint]] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)
