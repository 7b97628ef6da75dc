import logging
import os
import threading
from dataclasses import asdict
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv
from pydantic import BaseModel, Field
try:
    from backend.app.services.aggregator import AggregationError
    from backend.app.services.pipeline import presentation_items, run_radar
    from backend.app.services.settings import ConfigError, configure_logging, load_settings
except ModuleNotFoundError:
    from app.services.aggregator import AggregationError
    from app.services.pipeline import presentation_items, run_radar
    from app.services.settings import ConfigError, configure_logging, load_settings

logger = logging.getLogger(__name__)

NO_RESULTS_MESSAGE = "No videos matched the criteria in this run."
RUN_LOCK = threading.Lock()


class RadarVideo(BaseModel):
    title: str
    channelTitle: str
    viewCount: int
    viewsPerHour: int
    hoursSincePublished: float
    url: str


class RadarRunResponse(BaseModel):
    items: list[RadarVideo] = Field(default_factory=list)
    meta: dict[str, Any] = Field(default_factory=dict)


# ---------------------------
# App setup
# ---------------------------

load_dotenv()
configure_logging()


def parse_cors_origins() -> tuple[list[str], bool]:
    raw = (os.getenv("CORS_ALLOWED_ORIGINS") or "").strip()
    if not raw:
        return ["http://localhost:3000"], True
    if raw == "*":
        return ["*"], False
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    if not origins:
        return ["http://localhost:3000"], True
    return origins, True

app = FastAPI()

cors_origins, cors_credentials = parse_cors_origins()

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=cors_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AggregationError)
async def aggregation_error_handler(_request: Request, exc: AggregationError):
    return JSONResponse(
        status_code=502,
        content={
            "detail": f"Discovery run failed: {exc}",
            "error_code": "run_failed",
        },
    )


@app.exception_handler(ConfigError)
async def config_error_handler(_request: Request, exc: ConfigError):
    return JSONResponse(
        status_code=500,
        content={
            "detail": str(exc),
            "error_code": "misconfigured",
        },
    )


@app.get("/health")
def health():
    return {"ok": True}


@app.post("/radar/run", response_model=RadarRunResponse)
def run_viral_radar(notify: bool = True):
    """
    Run discovery once and return the ranked videos.
    Runs are serialized; a second request while one is active gets 409.
    """
    settings = load_settings()
    if not RUN_LOCK.acquire(blocking=False):
        logger.warning("Rejected discovery run: another run is in progress")
        raise HTTPException(status_code=409, detail="A discovery run is already in progress.")
    try:
        result = run_radar(settings, send=notify)
    finally:
        RUN_LOCK.release()

    items = presentation_items(result.videos)
    return {
        "items": items,
        "meta": {
            "count": len(items),
            "message": None if items else NO_RESULTS_MESSAGE,
            "report_sent": result.report_sent,
            "delivery_error": result.delivery_error,
            "keywords": [asdict(outcome) for outcome in result.outcomes],
            "stage_counts": result.stage_counts,
        },
    }
