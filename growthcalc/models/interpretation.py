"""
Plain-language interpretation of a percentile / z-score.

Every metric uses seven bands around the 3rd, 10th, 25th, 75th, 90th and
97th percentiles. Height-for-age closes bands on the lower edge
(p >= 97, p >= 90, ...); weight, BMI and weight-for-length use
<3, <10, <25, <=75, <=90, <=97, >97.
"""
from typing import NamedTuple

from growthcalc.models.errors import UnknownReference


class Interpretation(NamedTuple):
    interpretation: str
    advice: str
    is_normal: bool


def height_band(percentile: float) -> int:
    """Band index 0 (lowest) to 6 (highest), lower edges inclusive."""
    for idx, edge in ((6, 97), (5, 90), (4, 75), (3, 25), (2, 10), (1, 3)):
        if percentile >= edge:
            return idx
    return 0


def weight_band(percentile: float) -> int:
    if percentile < 3:
        return 0
    if percentile < 10:
        return 1
    if percentile < 25:
        return 2
    if percentile <= 75:
        return 3
    if percentile <= 90:
        return 4
    if percentile <= 97:
        return 5
    return 6


_HEIGHT_CATEGORY = {
    6: 'very tall',
    5: 'tall',
    4: 'above average',
    3: 'normal',
    2: 'below average but still within normal range',
    1: 'short stature',
}

_HEIGHT_ADVICE = {
    6: 'Your child is growing very well and is much taller than average. '
       'Continue regular check-ups with your healthcare provider.',
    5: 'Your child is growing well and is taller than average. '
       'Continue monitoring growth every 6-12 months.',
    4: 'Your child is growing well. Continue regular monitoring and maintain '
       'healthy nutrition and exercise habits.',
    3: 'Your child is growing normally. Most children between the 10th and 90th '
       'percentile are growing well. Continue monitoring every 6-12 months.',
    2: 'Your child is growing within the normal range, though below average. '
       'Monitor growth closely and consult your healthcare provider if you have concerns.',
    1: 'Your child may have short stature. Consider consulting a pediatrician '
       'or pediatric endocrinologist for evaluation.',
    0: 'Your child has significant short stature. It is recommended to consult '
       'with a pediatrician or pediatric endocrinologist for further evaluation '
       'and possible treatment options.',
}


def _height_interpretation(percentile: float, z_score: float,
                           standard: str) -> Interpretation:
    term = 'length' if standard == 'WHO' else 'height'
    band = height_band(percentile)
    if band == 0:
        text = (
            f"Your child's {term} is below the 3rd percentile (Z-score: {z_score:.2f}), "
            f"which means they are shorter than 97% of children their age and gender. "
            f"This indicates significant short stature."
        )
    else:
        text = (
            f"Your child's {term} is at the {percentile:.1f}th percentile, which means "
            f"they are taller than {percentile:.1f}% of children their age and gender. "
            f"This is considered {_HEIGHT_CATEGORY[band]}."
        )
    # Above the 97th percentile still counts as normal for height.
    return Interpretation(text, _HEIGHT_ADVICE[band], band >= 2)


_BAND_RANGES = {
    0: 'below the 3rd percentile',
    1: 'between the 3rd and 10th percentiles',
    2: 'between the 10th and 25th percentiles',
    3: 'between the 25th and 75th percentiles',
    4: 'between the 75th and 90th percentiles',
    5: 'between the 90th and 97th percentiles',
    6: 'above the 97th percentile',
}


def _by_age_texts(term: str) -> dict:
    """Interpretation/advice pairs shared by weight-for-age and BMI-for-age."""
    return {
        0: (f'indicating very low {term} for age. This may require medical evaluation.',
            f'Consult with your healthcare provider immediately. Very low {term} may '
            f'indicate underlying health issues or nutritional concerns that need '
            f'medical attention.'),
        1: (f'indicating low {term} for age. Consider discussing with your healthcare provider.',
            f"Schedule a visit with your healthcare provider to discuss your child's "
            f"{term}. They can help identify potential causes and develop a plan for "
            f"healthy weight gain."),
        2: (f'indicating below average {term} for age.',
            f"Monitor your child's {term} regularly. Ensure they are eating a balanced "
            f"diet with adequate calories and nutrients. Consider consulting with a "
            f"pediatrician if concerns persist."),
        3: (f'indicating normal {term} for age.',
            f"Your child's {term} is within the normal range. Continue providing a "
            f"balanced diet and regular physical activity to maintain healthy growth."),
        4: (f'indicating above average {term} for age.',
            f"Your child's {term} is above average but still within a healthy range. "
            f"Focus on balanced nutrition and regular physical activity."),
        5: (f'indicating high {term} for age. Consider discussing with your healthcare provider.',
            f"Consider discussing your child's {term} with your healthcare provider. "
            f"They can help develop strategies for healthy weight management through "
            f"diet and exercise."),
        6: (f'indicating very high {term} for age. This may require medical evaluation.',
            f'Consult with your healthcare provider immediately. Very high {term} may '
            f'indicate health risks that require medical evaluation and intervention.'),
    }


_WFL_TEXTS = {
    0: ('indicating very low weight for their length. This may require medical evaluation.',
        'Consult with your healthcare provider immediately. Very low weight-for-length '
        'may indicate underlying health issues or nutritional concerns that need '
        'medical attention.'),
    1: ('indicating low weight for their length. Consider discussing with your '
        'healthcare provider.',
        "Schedule a visit with your healthcare provider to discuss your child's "
        "weight-for-length. They can help identify potential causes and develop a "
        "plan for healthy weight gain."),
    2: ('indicating below average weight for their length.',
        "Monitor your child's weight-for-length regularly. Ensure they are eating a "
        "balanced diet with adequate calories and nutrients. Consider consulting "
        "with a pediatrician if concerns persist."),
    3: ('indicating normal weight for their length.',
        "Your child's weight-for-length is within the normal range. Continue providing "
        "a balanced diet and age-appropriate physical activity to maintain healthy growth."),
    4: ('indicating above average weight for their length.',
        "Your child's weight-for-length is above average but still within a healthy "
        "range. Focus on balanced nutrition and age-appropriate physical activity."),
    5: ('indicating elevated weight for their length. Continue monitoring growth '
        'patterns and discuss with your healthcare provider if concerns arise.',
        "Continue monitoring your child's growth patterns. Ensure balanced nutrition "
        "and age-appropriate physical activity. Discuss with your healthcare provider "
        "if this pattern continues or if you have concerns."),
    6: ('indicating very high weight for their length. This may require medical evaluation.',
        'Consult with your healthcare provider immediately. Very high weight-for-length '
        'may indicate health concerns that need medical evaluation and intervention.'),
}

_BANDED_TEXTS = {
    'weight_for_age': ('weight', _by_age_texts('weight')),
    'bmi_for_age': ('BMI', _by_age_texts('BMI')),
    'weight_for_length': ('weight-for-length', _WFL_TEXTS),
}


def generate_interpretation(percentile: float, z_score: float, standard: str,
                            metric: str = 'height_for_age') -> Interpretation:
    if metric == 'height_for_age':
        return _height_interpretation(percentile, z_score, standard)
    try:
        term, texts = _BANDED_TEXTS[metric]
    except KeyError:
        raise UnknownReference(f"No interpretation bands for metric: {metric}") from None

    band = weight_band(percentile)
    summary, advice = texts[band]
    text = f"Your child's {term} is {_BAND_RANGES[band]}, {summary}"
    return Interpretation(text, advice, 3 <= percentile <= 97)
