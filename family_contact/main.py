"""FastAPI application entry point."""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from family_contact.core.config import settings
from family_contact.core.exceptions import (
    CascadeInconsistencyError,
    ContactNotAllowedError,
    FamilyContactError,
    InvalidTransitionError,
    NotFoundError,
    ValidationFailure,
)
from family_contact.db.session import engine

logging.basicConfig(level=settings.LOG_LEVEL.upper())

# ============================================================================
# Sentry Integration (optional, for production error tracking)
# ============================================================================

if settings.SENTRY_DSN and settings.ENV != "dev":
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENV,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
        traces_sample_rate=0.1,
        send_default_pii=False,  # Names, notes and child views stay out of Sentry
    )
    logging.info("Sentry initialized for error tracking")


# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="Family Contact API",
    description="Family contact scheduling, session recording and contact risk assessment",
    version=settings.VERSION,
    docs_url="/docs" if settings.ENV == "dev" else None,
    redoc_url="/redoc" if settings.ENV == "dev" else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
)


# ============================================================================
# Error mapping
# ============================================================================

# Most specific first: InvalidTransitionError is a ValidationFailure
ERROR_STATUS_CODES: list[tuple[type[FamilyContactError], int]] = [
    (NotFoundError, 404),
    (ContactNotAllowedError, 409),
    (InvalidTransitionError, 409),
    (ValidationFailure, 422),
    (CascadeInconsistencyError, 500),
]


def status_code_for(exc: FamilyContactError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_type):
            return status_code
    return 400


@app.exception_handler(FamilyContactError)
async def family_contact_error_handler(request: Request, exc: FamilyContactError):
    content: dict = {"detail": str(exc)}
    field = getattr(exc, "field", None)
    if field:
        content["field"] = field
    return JSONResponse(status_code=status_code_for(exc), content=content)


# ============================================================================
# Routers
# ============================================================================

from family_contact.routers import (  # noqa: E402
    contact_schedules,
    contact_sessions,
    family_members,
    risk_assessments,
    statistics,
)

app.include_router(family_members.router, prefix="/family-members", tags=["family-members"])
app.include_router(contact_schedules.router, prefix="/contact-schedules", tags=["contact-schedules"])
app.include_router(contact_sessions.router, prefix="/contact-sessions", tags=["contact-sessions"])
app.include_router(risk_assessments.router, prefix="/risk-assessments", tags=["risk-assessments"])
app.include_router(statistics.router, prefix="/statistics", tags=["statistics"])


# ============================================================================
# Health Check
# ============================================================================

@app.get("/health")
def health():
    """
    Health check endpoint.

    Verifies database connectivity and returns environment info.
    """
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return {"status": "ok", "env": settings.ENV, "version": settings.VERSION}
