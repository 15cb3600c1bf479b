from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from overtime_tracker.api.routes import health
from overtime_tracker.core.config import settings
from overtime_tracker.core.errors import TrackingError
from overtime_tracker.core.logging import configure_logging, get_logger
from overtime_tracker.core.monitoring import configure_error_monitoring
from overtime_tracker.core.observability import configure_observability
from overtime_tracker.domains.office_hours.router import router as office_hours_router
from overtime_tracker.domains.overtime.router import router as overtime_router
from overtime_tracker.domains.tracking.router import router as tracking_router

configure_logging(settings.log_level, json_logs=settings.env != "dev")
configure_observability()
configure_error_monitoring()
logger = get_logger(__name__)

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(tracking_router)
app.include_router(overtime_router)
app.include_router(office_hours_router)

@app.exception_handler(TrackingError)
async def tracking_error_handler(request: Request, exc: TrackingError) -> JSONResponse:
    logger.info(
        "tracking_request_rejected",
        path=request.url.path,
        error=type(exc).__name__,
        status_code=exc.status_code,
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

@app.on_event("startup")
def startup_event() -> None:
    logger.info("startup_complete", env=settings.env)

@app.get("/")
def root() -> dict[str, str]:
    return {"message": "Overtime tracking API running", "environment": settings.env}
