"""
Chronological age from date of birth and measurement date.
"""
import math
from datetime import date, datetime
from typing import Union

from config.settings import AVERAGE_MONTH_DAYS
from growthcalc.models.data_structures import AgeCalculation
from growthcalc.models.errors import InvalidDate, InvalidRange

DateLike = Union[str, date]


def parse_date(value: DateLike) -> date:
    """Parse an ISO date or datetime string; a datetime keeps only its date part."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidDate(f"Invalid date: {value!r}")
    text = value.strip()
    try:
        return datetime.fromisoformat(text).date()
    except ValueError as exc:
        raise InvalidDate(f"Invalid date format: {value!r}") from exc


def calculate_age(date_of_birth: DateLike, measurement_date: DateLike) -> AgeCalculation:
    birth = parse_date(date_of_birth)
    measured = parse_date(measurement_date)
    if measured < birth:
        raise InvalidRange(
            f"Measurement date {measured} cannot be before birth date {birth}"
        )

    age_in_days = (measured - birth).days
    age_in_months = age_in_days / AVERAGE_MONTH_DAYS
    return AgeCalculation(
        age_years=math.floor(age_in_months / 12),
        age_months=math.floor(age_in_months % 12),
        age_in_months=age_in_months,
        age_in_days=age_in_days,
    )
