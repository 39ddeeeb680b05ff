"""
Configuration for the Pediatric Growth Percentile Engine.
"""
import os

# ── Server ────────────────────────────────────────────────────
PORT = int(os.environ.get("PORT", 8000))
HOST = os.environ.get("HOST", "0.0.0.0")
DEBUG = os.environ.get("DEBUG", "false").lower() == "true"
LOG_LEVEL = os.environ.get("LOG_LEVEL", "DEBUG" if DEBUG else "INFO")

# ── Auth (optional) ───────────────────────────────────────────
AUTH_ENABLED = os.environ.get("AUTH_ENABLED", "false").lower() == "true"
AUTH_USERNAME = os.environ.get("AUTH_USERNAME", "admin")
AUTH_PASSWORD = os.environ.get("AUTH_PASSWORD", "changeme")

# ── Age / Standard Selection ─────────────────────────────────
AVERAGE_MONTH_DAYS = 30.4375      # 365.25 / 12
WHO_MAX_AGE_MONTHS = 24           # WHO up to and including 24 months, CDC after
ADULT_REFERENCE_AGE_MONTHS = 240  # 20 years, used for parental z-scores
MAX_SUPPORTED_AGE_MONTHS = 240

# ── Reference Data ───────────────────────────────────────────
# Directory with CDC's published statage.csv / wtage.csv / bmiagerev.csv.
# Unset: the embedded abridged CDC knots are used.
CDC_DATA_DIR = os.environ.get("CDC_DATA_DIR")

# ── Chart Generation ─────────────────────────────────────────
CHART_WHO_RANGE = (0, 24)
CHART_CDC_RANGE = (24, 240)
CHART_STEP_MONTHS = 1
WFL_CHART_RANGE = (45.0, 110.0)
WFL_CHART_STEP_CM = 0.5
MPH_LINE_START_MONTHS = 24

# ── Input Plausibility (HTTP boundary) ───────────────────────
CHILD_HEIGHT_CM_BOUNDS = (30.0, 220.0)
CHILD_WEIGHT_KG_BOUNDS = (1.5, 200.0)
PARENT_HEIGHT_CM_BOUNDS = (120.0, 220.0)
