"""
Pediatric Growth Percentile Engine: FastAPI Backend
===================================================

Thin HTTP adapter over the LMS growth engine. Stateless: every request is
computed from its body and the static WHO/CDC reference tables.

REST API endpoints:
    POST   /calculate                   Full calculation for one child
    POST   /age                         Chronological age from two dates
    POST   /zscore                      Z-score & percentile for one value
    POST   /mid-parental-height         MPH and target height range
    GET    /reference/percentile-lines  Percentile curves for charting
    GET    /health                      Health check
"""
import logging
import secrets
from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from pydantic import BaseModel, Field, model_validator

from config.settings import (
    AUTH_ENABLED, AUTH_PASSWORD, AUTH_USERNAME, CHILD_HEIGHT_CM_BOUNDS,
    CHILD_WEIGHT_KG_BOUNDS, HOST, LOG_LEVEL, MAX_SUPPORTED_AGE_MONTHS,
    PARENT_HEIGHT_CM_BOUNDS, PORT,
)
from growthcalc.models.age import calculate_age
from growthcalc.models.calculator import GrowthCalculator
from growthcalc.models.chart_data import age_chart, weight_for_length_chart
from growthcalc.models.data_structures import (
    GENDERS, HEIGHT_UNITS, MEASUREMENTS, METRICS, STANDARDS, WEIGHT_UNITS, ChildData,
)
from growthcalc.models.errors import GrowthCalcError
from growthcalc.models.lms_engine import LMSEngine
from growthcalc.models.mid_parental import calculate_mid_parental_height
from growthcalc.models.units import convert_height, convert_weight

VERSION = "1.0.0"

logger = logging.getLogger(__name__)

# ── Auth ─────────────────────────────────────────────────────────
security = HTTPBasic()

def verify_credentials(credentials: HTTPBasicCredentials = Depends(security)):
    """HTTP Basic Auth, only enforced when AUTH_ENABLED=true."""
    if not AUTH_ENABLED:
        return True
    correct_user = secrets.compare_digest(credentials.username, AUTH_USERNAME)
    correct_pass = secrets.compare_digest(credentials.password, AUTH_PASSWORD)
    if not (correct_user and correct_pass):
        raise HTTPException(
            status_code=401,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )
    return True

# ── Engine ───────────────────────────────────────────────────────

_engine = LMSEngine()
_calculator = GrowthCalculator(_engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Growth engine ready: metrics=%s", _engine.available_metrics)
    yield
    logger.info("Shutting down")


# ── App ──────────────────────────────────────────────────────

_deps = [Depends(verify_credentials)] if AUTH_ENABLED else []

app = FastAPI(
    title="Pediatric Growth Percentile API",
    description=(
        "WHO (0–24 months) and CDC (2–20 years) LMS growth engine. "
        "Computes z-scores, percentiles and interpretations for height, "
        "weight, BMI and weight-for-length, plus mid-parental height."
    ),
    version=VERSION,
    lifespan=lifespan,
    dependencies=_deps,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(GrowthCalcError)
async def growth_error_handler(request: Request, exc: GrowthCalcError):
    logger.info("Rejected %s: %s", request.url.path, exc)
    return JSONResponse(status_code=422, content={"detail": str(exc),
                                                  "error": type(exc).__name__})


# ── Request / Response Models ─────────────────────────────────


def _pattern(choices) -> str:
    return "^(" + "|".join(choices) + ")$"


GENDER = _pattern(GENDERS)
HEIGHT_UNIT = _pattern(HEIGHT_UNITS)
WEIGHT_UNIT = _pattern(WEIGHT_UNITS)
METRIC = _pattern(METRICS)


def _check_bounds(value: Optional[float], bounds, label: str, unit: str):
    if value is not None and not bounds[0] <= value <= bounds[1]:
        raise ValueError(
            f"{label} must be between {bounds[0]:g} and {bounds[1]:g} {unit}"
        )


class ChildDataRequest(BaseModel):
    gender: str = Field(..., pattern=GENDER)
    date_of_birth: str
    measurement_date: str
    height: Optional[float] = Field(None, gt=0)
    height_unit: str = Field("cm", pattern=HEIGHT_UNIT)
    weight: Optional[float] = Field(None, gt=0)
    weight_unit: str = Field("kg", pattern=WEIGHT_UNIT)
    mother_height: Optional[float] = Field(None, gt=0)
    father_height: Optional[float] = Field(None, gt=0)
    mother_height_unit: str = Field("cm", pattern=HEIGHT_UNIT)
    father_height_unit: str = Field("cm", pattern=HEIGHT_UNIT)
    selected_measurements: List[str] = Field(
        default_factory=lambda: ["height"], min_length=1
    )
    is_adopted: bool = False

    @model_validator(mode="after")
    def check_plausible(self):
        for m in self.selected_measurements:
            if m not in MEASUREMENTS:
                raise ValueError(f"Unknown measurement: {m}")
        if self.height is not None:
            _check_bounds(convert_height(self.height, self.height_unit, "cm"),
                          CHILD_HEIGHT_CM_BOUNDS, "Height", "cm")
        if self.weight is not None:
            _check_bounds(convert_weight(self.weight, self.weight_unit, "kg"),
                          CHILD_WEIGHT_KG_BOUNDS, "Weight", "kg")
        for label, value, unit in (
            ("Mother's height", self.mother_height, self.mother_height_unit),
            ("Father's height", self.father_height, self.father_height_unit),
        ):
            if value is not None:
                _check_bounds(convert_height(value, unit, "cm"),
                              PARENT_HEIGHT_CM_BOUNDS, label, "cm")
        return self

    def to_child_data(self) -> ChildData:
        data = self.model_dump()
        data["selected_measurements"] = tuple(data["selected_measurements"])
        return ChildData(**data)


class AgeRequest(BaseModel):
    date_of_birth: str
    measurement_date: str


class ZScoreRequest(BaseModel):
    metric: str = Field(..., pattern=METRIC)
    gender: str = Field(..., pattern=GENDER)
    x: float = Field(..., ge=0, description="Age in months, or length in cm")
    value: float = Field(..., gt=0)
    standard: Optional[str] = Field(None, pattern=_pattern(STANDARDS))

class ZScoreResponse(BaseModel):
    metric: str
    standard: str
    L: float
    M: float
    S: float
    z_score: float
    percentile: float

class MidParentalRequest(BaseModel):
    gender: str = Field(..., pattern=GENDER)
    mother_height: float = Field(..., gt=0)
    father_height: float = Field(..., gt=0)
    mother_height_unit: str = Field("cm", pattern=HEIGHT_UNIT)
    father_height_unit: str = Field("cm", pattern=HEIGHT_UNIT)


# ── Endpoints ─────────────────────────────────────────────────

@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "metrics_available": _engine.available_metrics,
        "version": VERSION,
    }


@app.post("/calculate")
async def calculate(req: ChildDataRequest,
                    include_charts: bool = Query(False)):
    child = req.to_child_data()
    return _calculator.calculate(
        child, include_charts=include_charts,
        max_age_months=MAX_SUPPORTED_AGE_MONTHS,
    ).to_dict()


@app.post("/age")
async def age(req: AgeRequest):
    return asdict(calculate_age(req.date_of_birth, req.measurement_date))


@app.post("/zscore", response_model=ZScoreResponse)
async def zscore(req: ZScoreRequest):
    standard = req.standard or _engine.standard_for(req.metric, req.x)
    lms = _engine.lookup(req.metric, req.gender, req.x, standard)
    z = _engine.compute_zscore(req.metric, req.gender, req.x, req.value, standard)
    return ZScoreResponse(
        metric=req.metric, standard=standard,
        L=lms.L, M=lms.M, S=lms.S,
        z_score=round(z, 3),
        percentile=round(_engine.zscore_to_percentile(z), 1),
    )


@app.post("/mid-parental-height")
async def mid_parental_height(req: MidParentalRequest):
    mph = calculate_mid_parental_height(
        req.gender,
        convert_height(req.mother_height, req.mother_height_unit, "cm"),
        convert_height(req.father_height, req.father_height_unit, "cm"),
    )
    return asdict(mph)


# ── Reference Lines ──────────────────────────────────────────

@app.get("/reference/percentile-lines")
async def get_percentile_lines(
    metric: str = Query("height_for_age", pattern=METRIC),
    sex: str = Query("male", pattern=GENDER),
    age_months: float = Query(0.0, ge=0, le=MAX_SUPPORTED_AGE_MONTHS,
                              description="Child's age; selects the WHO or CDC window"),
):
    if metric == "weight_for_length":
        standard = "WHO"
        points = weight_for_length_chart(sex)
    else:
        standard = _engine.standard_for(metric, age_months)
        points = age_chart(metric, sex, age_months)
    return {
        "metric": metric,
        "sex": sex,
        "standard": standard,
        "points": [asdict(p) for p in points],
    }


# ── Run ───────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("growthcalc.api.server:app", host=HOST, port=PORT, reload=True)
