import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .config import settings
from .redis_client import redis_client
from .routers import capacities, facilities, halls, rokuyo, schedules, slots
from .services.turnover import TurnoverConfigError

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Hall Turnover Booking API")

app.include_router(facilities.router)
app.include_router(halls.router)
app.include_router(schedules.router)
app.include_router(capacities.router)
app.include_router(rokuyo.router)
app.include_router(slots.router)


@app.exception_handler(TurnoverConfigError)
def turnover_config_error_handler(request: Request, exc: TurnoverConfigError):
    logger.warning(f"Invalid turnover configuration on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": str(exc)},
    )


@app.get("/health")
def health():
    try:
        redis_ok = bool(redis_client.ping())
    except Exception as e:
        logger.warning(f"Redis ping failed: {e}")
        redis_ok = False
    return {"status": "ok", "redis": redis_ok}
