# ==============================================================
# app.py — Reef Suitability & Forecast Service
# ==============================================================

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field
import logging
import os
import uvicorn


from config import DEFAULT_PORT, FORECAST_STEPS, LOG_LEVEL_ENV, MAX_FORECAST_STEPS, PORT_ENV
from pipeline import run_analysis
from readings import Reading, parse_csv
from settings_io import load_catalog
from suitability import evaluate, status_from_index

logger = logging.getLogger(__name__)

app = FastAPI(title="Reef Suitability Forecast Service")

_catalog = None


def get_catalog():
    global _catalog
    if _catalog is None:
        _catalog = load_catalog()
    return _catalog


@app.on_event("startup")
def startup_event():
    get_catalog()
    logger.info("Threshold catalog loaded on startup")


# ---------------------------------------------------------------
# Models (Request / Response Schemas)
# ---------------------------------------------------------------
class ReadingIn(BaseModel):
    time: str | float
    location: str = Field(min_length=1)
    water_temperature: float = Field(allow_inf_nan=False)
    salinity: float = Field(allow_inf_nan=False)
    ph_level: float = Field(allow_inf_nan=False, ge=0, le=14)
    dissolved_oxygen: float = Field(allow_inf_nan=False, ge=0)
    turbidity: float = Field(allow_inf_nan=False, ge=0)
    nitrate: float = Field(allow_inf_nan=False, ge=0)


class SuitabilityOut(BaseModel):
    is_suitable: bool
    suitability_index: int
    status: str
    summary: str
    threatening: dict[str, bool]
    cautions: list[str]
    improvements: list[str]


class ReadingOut(SuitabilityOut):
    time: str | float
    location: str
    water_temperature: float
    salinity: float
    ph_level: float
    dissolved_oxygen: float
    turbidity: float
    nitrate: float
    is_prediction: bool = False


class ForecastOut(BaseModel):
    time: str | float
    location: str
    water_temperature: float
    salinity: float
    ph_level: float
    dissolved_oxygen: float
    turbidity: float
    nitrate: float
    is_prediction: bool = True
    is_suitable: bool | None = None
    suitability_index: int | None = None
    status: str


class AnalyzeRequest(BaseModel):
    data: str
    steps: int = Field(default=FORECAST_STEPS, ge=0, le=MAX_FORECAST_STEPS)
    score_forecasts: bool = False


class AnalyzeResponse(BaseModel):
    results: list[ReadingOut]
    forecasts: list[ForecastOut]
    forecast_available: bool
    time_step: str | None


def _suitability_out(res) -> dict:
    return {
        "is_suitable": res.is_suitable,
        "suitability_index": res.index,
        "status": res.status,
        "summary": res.rationale,
        "threatening": dict(res.flags),
        "cautions": list(res.cautions),
        "improvements": list(res.recommendations),
    }


def _fields(r) -> dict:
    return {
        "time": r.time,
        "location": r.location,
        "water_temperature": r.water_temperature,
        "salinity": r.salinity,
        "ph_level": r.ph_level,
        "dissolved_oxygen": r.dissolved_oxygen,
        "turbidity": r.turbidity,
        "nitrate": r.nitrate,
    }


# ---------------------------------------------------------------
# Health Check
# ---------------------------------------------------------------
@app.get("/health")
def health():
    return {"ok": True}


# ---------------------------------------------------------------
# Evaluate one reading
# ---------------------------------------------------------------
@app.post("/evaluate", response_model=SuitabilityOut)
def evaluate_reading(reading: ReadingIn):
    res = evaluate(Reading(**reading.model_dump()), get_catalog())
    return SuitabilityOut(**_suitability_out(res))


# ---------------------------------------------------------------
# Analyze a CSV batch (score + forecast)
# ---------------------------------------------------------------
@app.post("/analyze", response_model=AnalyzeResponse)
def analyze(req: AnalyzeRequest):
    readings = parse_csv(req.data)
    if not readings:
        raise HTTPException(
            status_code=400,
            detail="No valid data found or data format is incorrect. Check headers and numeric values.",
        )

    report = run_analysis(readings, get_catalog(), steps=req.steps, score_forecasts=req.score_forecasts)

    results = [
        ReadingOut(**_fields(r), **_suitability_out(res))
        for r, res in zip(report.readings, report.results)
    ]
    forecasts = [
        ForecastOut(
            **_fields(p),
            is_suitable=p.is_suitable,
            suitability_index=p.suitability_index,
            status="Prediction" if p.suitability_index is None else status_from_index(p.suitability_index),
        )
        for p in report.forecasts
    ]
    return AnalyzeResponse(
        results=results,
        forecasts=forecasts,
        forecast_available=report.forecast_available,
        time_step=None if report.time_step is None else str(report.time_step),
    )


# ---------------------------------------------------------------
# Run Server (for local test)
# ---------------------------------------------------------------
if __name__ == "__main__":
    logging.basicConfig(
        level=os.environ.get(LOG_LEVEL_ENV, "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    port = int(os.environ.get(PORT_ENV, DEFAULT_PORT))
    uvicorn.run(
        "app:app",
        host="0.0.0.0",
        port=port,
        reload=False
    )
