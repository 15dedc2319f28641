# rental_reservations/main.py

import structlog
from fastapi import FastAPI

from rental_reservations.logging_config import setup_logging
from rental_reservations.middleware import RequestIDMiddleware
from rental_reservations.routes.health import router as health_router
from rental_reservations.routes.metrics import router as metrics_router

setup_logging()
logger = structlog.get_logger(__name__)

app = FastAPI(
    title="Rental Reservations",
    description="Operational endpoints for the vacation-rental reservation core",
    version="1.0.0",
)

app.add_middleware(RequestIDMiddleware)

app.include_router(health_router, tags=["Health"])
app.include_router(metrics_router, tags=["Metrics"])

logger.info("application_initialized")
