import logging
import time
from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import Depends, FastAPI, HTTPException, Query
from pydantic import BaseModel

from senko.application.config import resolve_config
from senko.application.factory import get_stats_service
from senko.application.stats.service import StatsService
from senko.consts import VERSION
from senko.domain.constants import HEATMAP_DAYS_BACK

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("senko.server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"Senko Server v{VERSION} starting up...")
    yield
    # Shutdown
    logger.info("Senko Server shutting down...")


app = FastAPI(
    title="Senko Server",
    description="Read-only study statistics for senko.",
    version=VERSION,
    lifespan=lifespan,
)


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


class StreakResponse(BaseModel):
    current_streak: int
    longest_streak: int
    last_study_date: str | None


class RetentionPointResponse(BaseModel):
    days_since_review: int
    retention_rate: float
    sample_size: int


class EfficiencyResponse(BaseModel):
    cards_per_minute: float
    average_time_per_card: float
    peak_hour: int | None
    total_study_time: int


class HeatmapValueResponse(BaseModel):
    date: str
    count: int


start_time = time.time()


def stats_service() -> StatsService:
    """Dependency: stats service over the configured data directory."""
    return get_stats_service(resolve_config())


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Simple health check to verify server is reachable.
    """
    return HealthResponse(status="ok", version=VERSION, uptime_seconds=time.time() - start_time)


@app.get("/version")
async def get_version():
    return {"version": VERSION}


@app.get("/stats/streak", response_model=StreakResponse)
def get_streak(service: StatsService = Depends(stats_service)):
    try:
        return StreakResponse(**asdict(service.streak()))
    except Exception as e:
        logger.error(f"Streak calculation failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/stats/retention", response_model=list[RetentionPointResponse])
def get_retention(service: StatsService = Depends(stats_service)):
    try:
        return [RetentionPointResponse(**asdict(p)) for p in service.retention()]
    except Exception as e:
        logger.error(f"Retention calculation failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/stats/efficiency", response_model=EfficiencyResponse)
def get_efficiency(service: StatsService = Depends(stats_service)):
    try:
        return EfficiencyResponse(**asdict(service.efficiency()))
    except Exception as e:
        logger.error(f"Efficiency calculation failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/stats/heatmap", response_model=list[HeatmapValueResponse])
def get_heatmap(
    days: int = Query(default=HEATMAP_DAYS_BACK, ge=1, le=3660),
    service: StatsService = Depends(stats_service),
):
    try:
        return [HeatmapValueResponse(**asdict(v)) for v in service.heatmap(days_back=days)]
    except Exception as e:
        logger.error(f"Heatmap generation failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))
