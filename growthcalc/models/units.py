"""
Unit conversion for height (cm/inches) and weight (kg/lb).
"""
from growthcalc.models.errors import InvalidInput

CM_PER_INCH = 2.54
KG_PER_LB = 0.45359237


def convert_height(value: float, from_unit: str, to_unit: str) -> float:
    if value < 0:
        raise InvalidInput(f"Height cannot be negative: {value}")
    if from_unit == to_unit:
        return value
    if from_unit == 'inches' and to_unit == 'cm':
        return value * CM_PER_INCH
    if from_unit == 'cm' and to_unit == 'inches':
        return value / CM_PER_INCH
    raise InvalidInput(f"Unsupported height units: {from_unit} -> {to_unit}")


def convert_weight(value: float, from_unit: str, to_unit: str) -> float:
    if value < 0:
        raise InvalidInput(f"Weight cannot be negative: {value}")
    if from_unit == to_unit:
        return value
    if from_unit == 'lb' and to_unit == 'kg':
        return value * KG_PER_LB
    if from_unit == 'kg' and to_unit == 'lb':
        return value / KG_PER_LB
    raise InvalidInput(f"Unsupported weight units: {from_unit} -> {to_unit}")


def calculate_bmi(weight_kg: float, height_cm: float) -> float:
    """BMI in kg/m², rounded to 2 decimals."""
    if weight_kg <= 0 or height_cm <= 0:
        raise InvalidInput("Weight and height must be positive values")
    height_m = height_cm / 100
    return round(weight_kg / (height_m * height_m), 2)
