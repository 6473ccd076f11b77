import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from homestay.config import ALLOWED_ORIGINS
from homestay.errors import DomainError
from homestay.logging_config import setup_logging
from homestay.middleware import RequestIDMiddleware
from homestay.routes.auth import router as auth_router
from homestay.routes.bookings import router as bookings_router
from homestay.routes.health import router as health_router
from homestay.routes.kyc import router as kyc_router
from homestay.routes.messages import router as messages_router
from homestay.routes.metrics import router as metrics_router
from homestay.routes.notifications import router as notifications_router
from homestay.routes.properties import router as properties_router
from homestay.routes.reviews import router as reviews_router
from homestay.routes.search import router as search_router
from homestay.routes.tax_forms import router as tax_forms_router
from homestay.routes.users import router as users_router

# Initialize structured logging
setup_logging()
logger = structlog.get_logger(__name__)

app = FastAPI(
    title="Homestay API",
    description="Short-term rental marketplace: listings, bookings, reviews and messaging",
    version="1.0.0",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS if "*" not in ALLOWED_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIDMiddleware)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Render business rule failures as {"error": kind, "detail": message}."""
    logger.info(
        "request_rejected",
        status_code=exc.status_code,
        error=exc.kind,
        detail=exc.message,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.kind, "detail": exc.message},
    )


# Register routers
app.include_router(health_router, tags=["Health"])
app.include_router(metrics_router, tags=["Metrics"])
app.include_router(auth_router, prefix="/api", tags=["Auth"])
app.include_router(users_router, prefix="/api", tags=["Users"])
app.include_router(properties_router, prefix="/api", tags=["Properties"])
app.include_router(bookings_router, prefix="/api", tags=["Bookings"])
app.include_router(reviews_router, prefix="/api", tags=["Reviews"])
app.include_router(messages_router, prefix="/api", tags=["Messages"])
app.include_router(notifications_router, prefix="/api", tags=["Notifications"])
app.include_router(search_router, prefix="/api", tags=["Search"])
app.include_router(kyc_router, prefix="/api", tags=["KYC"])
app.include_router(tax_forms_router, prefix="/api", tags=["Tax Forms"])


@app.on_event("startup")
def startup_event() -> None:
    """Initialize application on startup."""
    from homestay.db.engine import check_engine_health

    logger.info("FastAPI application starting up...")

    if not check_engine_health():
        logger.warning("database_unreachable_at_startup")

    logger.info("FastAPI application initialized")
