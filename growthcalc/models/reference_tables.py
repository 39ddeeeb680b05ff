"""
WHO / CDC LMS reference tables.

Sources:
    WHO Child Growth Standards (MGRS, 2006): length-for-age, weight-for-age,
    BMI-for-age (0-24 months, monthly) and weight-for-length (45-110 cm).
    CDC 2000 Growth Charts: stature-for-age, weight-for-age and BMI-for-age
    (24-240 months). The embedded knots (half-yearly to 5 years, yearly
    after) are abridged; set CDC_DATA_DIR to a directory holding CDC's
    statage.csv, wtage.csv and bmiagerev.csv to use the full published rows.

Tables are keyed by (metric, standard, gender) and frozen once at import.
Queries between knots are resolved by the LMS interpolator.
"""
import logging
from pathlib import Path
from typing import Dict, Tuple

import pandas as pd

from config.settings import CDC_DATA_DIR, WHO_MAX_AGE_MONTHS
from growthcalc.models.data_structures import LMSPoint
from growthcalc.models.errors import EmptyTable, UnknownReference

logger = logging.getLogger(__name__)

LMSTable = Tuple[LMSPoint, ...]

# =============================================================================
# WHO LMS Reference Tables (x = age in months, or length in cm for WFL)
# =============================================================================

WHO_LMS_TABLES = {
    'height_for_age': {
        'male': {
            0: (1.0, 49.8842, 0.03795), 1: (1.0, 54.7244, 0.03557),
            2: (1.0, 58.4249, 0.03424), 3: (1.0, 61.4292, 0.03328),
            4: (1.0, 63.8860, 0.03257), 5: (1.0, 65.9026, 0.03204),
            6: (1.0, 67.6236, 0.03165), 7: (1.0, 69.1645, 0.03139),
            8: (1.0, 70.5994, 0.03124), 9: (1.0, 71.9687, 0.03117),
            10: (1.0, 73.2812, 0.03118), 11: (1.0, 74.5388, 0.03125),
            12: (1.0, 75.7488, 0.03137), 13: (1.0, 76.9186, 0.03154),
            14: (1.0, 78.0497, 0.03174), 15: (1.0, 79.1458, 0.03197),
            16: (1.0, 80.2113, 0.03222), 17: (1.0, 81.2487, 0.03250),
            18: (1.0, 82.2587, 0.03279), 19: (1.0, 83.2418, 0.03310),
            20: (1.0, 84.1996, 0.03342), 21: (1.0, 85.1348, 0.03376),
            22: (1.0, 86.0477, 0.03410), 23: (1.0, 86.9410, 0.03445),
            24: (1.0, 87.8161, 0.03479),
        },
        'female': {
            0: (1.0, 49.1477, 0.03790), 1: (1.0, 53.6872, 0.03640),
            2: (1.0, 57.0673, 0.03568), 3: (1.0, 59.8029, 0.03520),
            4: (1.0, 62.0899, 0.03486), 5: (1.0, 64.0301, 0.03463),
            6: (1.0, 65.7311, 0.03448), 7: (1.0, 67.2873, 0.03441),
            8: (1.0, 68.7498, 0.03440), 9: (1.0, 70.1435, 0.03444),
            10: (1.0, 71.4818, 0.03452), 11: (1.0, 72.7710, 0.03464),
            12: (1.0, 74.0150, 0.03479), 13: (1.0, 75.2176, 0.03496),
            14: (1.0, 76.3817, 0.03514), 15: (1.0, 77.5099, 0.03534),
            16: (1.0, 78.6055, 0.03555), 17: (1.0, 79.6710, 0.03576),
            18: (1.0, 80.7079, 0.03598), 19: (1.0, 81.7182, 0.03620),
            20: (1.0, 82.7036, 0.03643), 21: (1.0, 83.6654, 0.03666),
            22: (1.0, 84.6040, 0.03688), 23: (1.0, 85.5202, 0.03711),
            24: (1.0, 86.4153, 0.03734),
        },
    },
    'weight_for_age': {
        'male': {
            0: (0.3487, 3.3464, 0.14602), 1: (0.2297, 4.4709, 0.13395),
            2: (0.1970, 5.5675, 0.12385), 3: (0.1738, 6.3762, 0.11727),
            4: (0.1553, 7.0023, 0.11316), 5: (0.1395, 7.5105, 0.11080),
            6: (0.1257, 7.9340, 0.10958), 7: (0.1134, 8.2970, 0.10902),
            8: (0.1021, 8.6151, 0.10882), 9: (0.0917, 8.9014, 0.10881),
            10: (0.0820, 9.1649, 0.10891), 11: (0.0730, 9.4122, 0.10906),
            12: (0.0644, 9.6479, 0.10925), 13: (0.0563, 9.8749, 0.10949),
            14: (0.0487, 10.0953, 0.10976), 15: (0.0413, 10.3108, 0.11007),
            16: (0.0343, 10.5228, 0.11041), 17: (0.0275, 10.7319, 0.11079),
            18: (0.0211, 10.9385, 0.11119), 19: (0.0148, 11.1430, 0.11164),
            20: (0.0087, 11.3462, 0.11211), 21: (0.0029, 11.5486, 0.11261),
            22: (-0.0028, 11.7504, 0.11314), 23: (-0.0083, 11.9514, 0.11369),
            24: (-0.0137, 12.1515, 0.11426),
        },
        'female': {
            0: (0.3809, 3.2322, 0.14171), 1: (0.1714, 4.1873, 0.13724),
            2: (0.0962, 5.1282, 0.13000), 3: (0.0402, 5.8458, 0.12619),
            4: (-0.0050, 6.4237, 0.12402), 5: (-0.0430, 6.8985, 0.12274),
            6: (-0.0756, 7.2970, 0.12204), 7: (-0.1039, 7.6422, 0.12178),
            8: (-0.1288, 7.9487, 0.12181), 9: (-0.1507, 8.2254, 0.12199),
            10: (-0.1700, 8.4800, 0.12223), 11: (-0.1872, 8.7192, 0.12247),
            12: (-0.2024, 8.9481, 0.12268), 13: (-0.2158, 9.1699, 0.12283),
            14: (-0.2278, 9.3870, 0.12294), 15: (-0.2384, 9.6008, 0.12299),
            16: (-0.2478, 9.8124, 0.12303), 17: (-0.2562, 10.0226, 0.12306),
            18: (-0.2637, 10.2315, 0.12309), 19: (-0.2703, 10.4393, 0.12315),
            20: (-0.2762, 10.6464, 0.12323), 21: (-0.2815, 10.8534, 0.12335),
            22: (-0.2862, 11.0608, 0.12350), 23: (-0.2903, 11.2688, 0.12369),
            24: (-0.2941, 11.4775, 0.12390),
        },
    },
    'bmi_for_age': {
        'male': {
            0: (-0.3053, 13.4069, 0.09560), 1: (0.2708, 14.9441, 0.09027),
            2: (0.1118, 16.3195, 0.08677), 3: (0.0068, 16.8987, 0.08495),
            4: (-0.0727, 17.1579, 0.08378), 5: (-0.1370, 17.2919, 0.08296),
            6: (-0.1913, 17.3422, 0.08234), 7: (-0.2385, 17.3288, 0.08183),
            8: (-0.2802, 17.2647, 0.08140), 9: (-0.3176, 17.1662, 0.08102),
            10: (-0.3516, 17.0488, 0.08068), 11: (-0.3828, 16.9239, 0.08037),
            12: (-0.4115, 16.7981, 0.08009), 13: (-0.4382, 16.6743, 0.07982),
            14: (-0.4630, 16.5548, 0.07958), 15: (-0.4863, 16.4409, 0.07935),
            16: (-0.5082, 16.3335, 0.07913), 17: (-0.5289, 16.2329, 0.07892),
            18: (-0.5484, 16.1392, 0.07873), 19: (-0.5669, 16.0528, 0.07854),
            20: (-0.5846, 15.9743, 0.07836), 21: (-0.6014, 15.9039, 0.07818),
            22: (-0.6174, 15.8412, 0.07802), 23: (-0.6328, 15.7852, 0.07786),
            24: (-0.6473, 15.7356, 0.07771),
        },
        'female': {
            0: (-0.0631, 13.3363, 0.09272), 1: (0.3448, 14.5679, 0.09556),
            2: (0.1749, 15.7679, 0.09371), 3: (0.0643, 16.3574, 0.09254),
            4: (-0.0191, 16.6703, 0.09166), 5: (-0.0864, 16.8386, 0.09096),
            6: (-0.1429, 16.9083, 0.09036), 7: (-0.1916, 16.9020, 0.08984),
            8: (-0.2344, 16.8404, 0.08939), 9: (-0.2725, 16.7406, 0.08898),
            10: (-0.3068, 16.6184, 0.08861), 11: (-0.3381, 16.4875, 0.08828),
            12: (-0.3667, 16.3568, 0.08797), 13: (-0.3932, 16.2311, 0.08768),
            14: (-0.4177, 16.1128, 0.08741), 15: (-0.4407, 16.0028, 0.08716),
            16: (-0.4623, 15.9017, 0.08693), 17: (-0.4825, 15.8096, 0.08671),
            18: (-0.5017, 15.7263, 0.08651), 19: (-0.5199, 15.6517, 0.08632),
            20: (-0.5372, 15.5855, 0.08616), 21: (-0.5537, 15.5278, 0.08601),
            22: (-0.5695, 15.4787, 0.08588), 23: (-0.5846, 15.4380, 0.08577),
            24: (-0.5989, 15.4052, 0.08567),
        },
    },
    'weight_for_length': {
        'male': {
            45: (-0.3521, 2.4410, 0.09182), 50: (-0.3521, 3.3460, 0.08900),
            55: (-0.3521, 4.5560, 0.08500), 60: (-0.3521, 5.9750, 0.08300),
            65: (-0.3521, 7.4310, 0.08180), 70: (-0.3521, 8.6500, 0.08080),
            75: (-0.3521, 9.6600, 0.08020), 80: (-0.3521, 10.7500, 0.07980),
            85: (-0.3521, 11.7000, 0.08000), 90: (-0.3521, 12.7400, 0.08060),
            95: (-0.3521, 13.8600, 0.08140), 100: (-0.3521, 15.0600, 0.08250),
            105: (-0.3521, 16.3600, 0.08380), 110: (-0.3521, 17.7800, 0.08530),
        },
        'female': {
            45: (-0.3833, 2.4607, 0.09029), 50: (-0.3833, 3.3900, 0.08900),
            55: (-0.3833, 4.5200, 0.08700), 60: (-0.3833, 5.8500, 0.08570),
            65: (-0.3833, 7.2400, 0.08460), 70: (-0.3833, 8.4600, 0.08380),
            75: (-0.3833, 9.5200, 0.08320), 80: (-0.3833, 10.4800, 0.08290),
            85: (-0.3833, 11.5800, 0.08300), 90: (-0.3833, 12.6400, 0.08350),
            95: (-0.3833, 13.7500, 0.08430), 100: (-0.3833, 14.9800, 0.08540),
            105: (-0.3833, 16.3200, 0.08670), 110: (-0.3833, 17.7900, 0.08810),
        },
    },
}

# =============================================================================
# CDC 2000 LMS Reference Tables (x = age in months)
# =============================================================================

CDC_REFERENCE_KNOTS = {
    'height_for_age': {
        'male': {
            24: (0.9415, 86.4522, 0.04032), 30: (0.7900, 91.2000, 0.04090),
            36: (0.6400, 95.4000, 0.04130), 42: (0.5200, 99.1000, 0.04150),
            48: (0.4200, 102.6000, 0.04160), 54: (0.3500, 106.0000, 0.04170),
            60: (0.3000, 109.3000, 0.04180), 72: (0.2300, 115.7000, 0.04210),
            84: (0.2000, 121.9000, 0.04260), 96: (0.2100, 127.9000, 0.04320),
            108: (0.2600, 133.4000, 0.04380), 120: (0.3600, 138.6000, 0.04450),
            132: (0.5100, 143.7000, 0.04540), 144: (0.7200, 149.3000, 0.04650),
            156: (0.9800, 156.0000, 0.04700), 168: (1.2000, 163.0000, 0.04550),
            180: (1.3200, 169.0000, 0.04270), 192: (1.3000, 172.9000, 0.04080),
            204: (1.2400, 175.2000, 0.04000), 216: (1.1900, 176.2000, 0.03980),
            228: (1.1700, 176.6000, 0.03990), 240: (1.1600, 176.8492, 0.04000),
        },
        'female': {
            24: (1.0724, 84.9756, 0.04079), 30: (0.9900, 89.9000, 0.04120),
            36: (0.9100, 94.2000, 0.04150), 42: (0.8400, 98.1000, 0.04170),
            48: (0.7800, 101.6000, 0.04190), 54: (0.7300, 105.0000, 0.04200),
            60: (0.6900, 108.4000, 0.04210), 72: (0.6300, 115.0000, 0.04260),
            84: (0.5900, 121.4000, 0.04320), 96: (0.5700, 127.6000, 0.04400),
            108: (0.5800, 133.0000, 0.04490), 120: (0.6300, 138.6000, 0.04560),
            132: (0.7400, 144.8000, 0.04560), 144: (0.8900, 151.2000, 0.04420),
            156: (1.0300, 156.7000, 0.04200), 168: (1.1200, 159.8000, 0.04030),
            180: (1.1600, 161.7000, 0.03950), 192: (1.1700, 162.5000, 0.03920),
            204: (1.1700, 162.9000, 0.03910), 216: (1.1700, 163.1000, 0.03910),
            228: (1.1700, 163.2500, 0.03910), 240: (1.1700, 163.3383, 0.03910),
        },
    },
    'weight_for_age': {
        'male': {
            24: (-0.2162, 12.6700, 0.10820), 30: (-0.2500, 13.6300, 0.10780),
            36: (-0.2900, 14.4000, 0.10850), 42: (-0.3400, 15.3600, 0.11050),
            48: (-0.4000, 16.3000, 0.11350), 54: (-0.4700, 17.3000, 0.11700),
            60: (-0.5500, 18.3800, 0.12100), 72: (-0.7000, 20.6500, 0.13000),
            84: (-0.8600, 23.0000, 0.14000), 96: (-0.9900, 25.6000, 0.15000),
            108: (-1.0600, 28.5000, 0.15900), 120: (-1.0500, 31.8000, 0.16600),
            132: (-0.9500, 35.6000, 0.17000), 144: (-0.7800, 40.0000, 0.17100),
            156: (-0.5900, 45.3000, 0.16800), 168: (-0.4300, 50.8000, 0.16200),
            180: (-0.3400, 56.0000, 0.15500), 192: (-0.3300, 60.8000, 0.14900),
            204: (-0.4000, 64.6000, 0.14500), 216: (-0.5400, 67.2000, 0.14300),
            228: (-0.7300, 69.0000, 0.14300), 240: (-0.9500, 70.6000, 0.14400),
        },
        'female': {
            24: (-0.7400, 12.1000, 0.10800), 30: (-0.7000, 13.1000, 0.11000),
            36: (-0.6800, 13.9000, 0.11300), 42: (-0.6900, 14.9000, 0.11700),
            48: (-0.7100, 15.9000, 0.12100), 54: (-0.7400, 16.9000, 0.12600),
            60: (-0.7800, 17.9000, 0.13100), 72: (-0.8500, 19.9000, 0.14100),
            84: (-0.9100, 22.4000, 0.15100), 96: (-0.9400, 25.3000, 0.16100),
            108: (-0.9200, 28.5000, 0.17000), 120: (-0.8500, 32.0000, 0.17600),
            132: (-0.7400, 36.0000, 0.17800), 144: (-0.6200, 40.5000, 0.17600),
            156: (-0.5300, 45.0000, 0.17100), 168: (-0.5000, 49.4000, 0.16400),
            180: (-0.5300, 52.0000, 0.15800), 192: (-0.6000, 53.7000, 0.15400),
            204: (-0.7000, 54.7000, 0.15200), 216: (-0.8100, 55.8000, 0.15200),
            228: (-0.9200, 56.9000, 0.15300), 240: (-1.0200, 57.7000, 0.15500),
        },
    },
    'bmi_for_age': {
        'male': {
            24: (-2.0100, 16.5800, 0.08060), 30: (-1.9200, 16.2600, 0.07800),
            36: (-1.8700, 16.0000, 0.07660), 42: (-1.8800, 15.8000, 0.07620),
            48: (-1.9300, 15.6300, 0.07670), 54: (-2.0100, 15.5000, 0.07790),
            60: (-2.1000, 15.4200, 0.07970), 72: (-2.3000, 15.3800, 0.08490),
            84: (-2.4600, 15.5000, 0.09150), 96: (-2.5400, 15.7800, 0.09850),
            108: (-2.5300, 16.1900, 0.10500), 120: (-2.4400, 16.6600, 0.11100),
            132: (-2.3000, 17.2000, 0.11600), 144: (-2.1400, 17.7900, 0.12000),
            156: (-1.9800, 18.4400, 0.12300), 168: (-1.8400, 19.1300, 0.12500),
            180: (-1.7300, 19.8200, 0.12600), 192: (-1.6400, 20.4800, 0.12700),
            204: (-1.5700, 21.0900, 0.12800), 216: (-1.5200, 21.6600, 0.13000),
            228: (-1.4900, 22.1700, 0.13200), 240: (-1.4700, 22.6400, 0.13400),
        },
        'female': {
            24: (-1.0200, 16.4200, 0.08510), 30: (-1.1600, 16.1000, 0.08400),
            36: (-1.3200, 15.8300, 0.08380), 42: (-1.4700, 15.6000, 0.08450),
            48: (-1.6100, 15.4200, 0.08600), 54: (-1.7400, 15.3000, 0.08820),
            60: (-1.8500, 15.2300, 0.09100), 72: (-2.0200, 15.2200, 0.09780),
            84: (-2.1200, 15.3900, 0.10570), 96: (-2.1600, 15.7100, 0.11400),
            108: (-2.1500, 16.1500, 0.12200), 120: (-2.1000, 16.6900, 0.12900),
            132: (-2.0200, 17.2800, 0.13500), 144: (-1.9300, 17.9000, 0.13900),
            156: (-1.8300, 18.5200, 0.14200), 168: (-1.7400, 19.1200, 0.14400),
            180: (-1.6500, 19.6700, 0.14500), 192: (-1.5700, 20.1600, 0.14600),
            204: (-1.5000, 20.5900, 0.14700), 216: (-1.4400, 20.9700, 0.14900),
            228: (-1.3900, 21.3100, 0.15100), 240: (-1.3500, 21.6300, 0.15300),
        },
    },
}

# =============================================================================
# Published CDC 2000 data files (cdc.gov/growthcharts/percentile_data_files.htm)
# =============================================================================

CDC_DATA_FILES = {
    'height_for_age': 'statage.csv',
    'weight_for_age': 'wtage.csv',
    'bmi_for_age': 'bmiagerev.csv',
}
_CDC_SEX_CODES = {1: 'male', 2: 'female'}


def read_cdc_lms_csv(path) -> dict:
    """Read one CDC LMS data file into {gender: {agemos: (L, M, S)}}.

    The published files repeat their header between the two sexes, so any
    row without numeric Sex/Agemos/L/M/S values is dropped.
    """
    try:
        df = pd.read_csv(path, dtype=str, skipinitialspace=True)
    except FileNotFoundError:
        raise UnknownReference(f"CDC reference file not found: {path}") from None
    df.columns = df.columns.str.strip()
    missing = {'Sex', 'Agemos', 'L', 'M', 'S'} - set(df.columns)
    if missing:
        raise UnknownReference(f"{path} is missing LMS columns: {sorted(missing)}")

    df = df[['Sex', 'Agemos', 'L', 'M', 'S']].apply(pd.to_numeric, errors='coerce').dropna()
    by_gender = {}
    for code, rows in df.groupby('Sex'):
        gender = _CDC_SEX_CODES.get(int(code))
        if gender is None:
            continue
        by_gender[gender] = {
            float(r.Agemos): (float(r.L), float(r.M), float(r.S))
            for r in rows.itertuples(index=False)
        }
    if not by_gender:
        raise EmptyTable(f"No LMS rows in {path}")
    return by_gender


def load_cdc_tables(data_dir) -> dict:
    """CDC tables in the embedded-table layout, read from the published CSVs."""
    data_dir = Path(data_dir)
    return {
        metric: read_cdc_lms_csv(data_dir / filename)
        for metric, filename in CDC_DATA_FILES.items()
    }


def _freeze(raw: dict) -> LMSTable:
    return tuple(
        LMSPoint(x=float(x), L=lms[0], M=lms[1], S=lms[2])
        for x, lms in sorted(raw.items())
    )


def build_tables(who: dict, cdc: dict) -> Dict[Tuple[str, str, str], LMSTable]:
    return {
        (metric, standard, gender): _freeze(table)
        for standard, source in (('WHO', who), ('CDC', cdc))
        for metric, by_gender in source.items()
        for gender, table in by_gender.items()
    }


if CDC_DATA_DIR:
    CDC_LMS_TABLES = load_cdc_tables(CDC_DATA_DIR)
    logger.info("Loaded CDC 2000 LMS tables from %s", CDC_DATA_DIR)
else:
    CDC_LMS_TABLES = CDC_REFERENCE_KNOTS

_TABLES = build_tables(WHO_LMS_TABLES, CDC_LMS_TABLES)


def select_standard(age_in_months: float) -> str:
    """WHO for 0-24 months inclusive, CDC beyond."""
    return 'WHO' if age_in_months <= WHO_MAX_AGE_MONTHS else 'CDC'


def get_table(metric: str, standard: str, gender: str) -> LMSTable:
    try:
        return _TABLES[(metric, standard, gender)]
    except KeyError:
        raise UnknownReference(
            f"No {standard} reference data for {metric} ({gender})"
        ) from None


def available_metrics(standard: str = None) -> list:
    return sorted({
        metric for (metric, std, _) in _TABLES
        if standard is None or std == standard
    })
