"""
Expense Manager API
Employees submit expenses, managers review them, finance pays them out.
"""

from contextlib import asynccontextmanager
import time

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException

from expense_manager.config.settings import settings
from expense_manager.config.database import engine, Base, SessionLocal, get_db
from expense_manager.database.setup_database import seed_dev_users
from expense_manager.exceptions import (
    ExpenseWorkflowError,
    ExpenseNotFoundError,
    ExpenseAccessDeniedError,
)
from expense_manager.middleware.logging_middleware import LoggingMiddleware
from expense_manager.utils.logger import setup_logger

# Table registration on Base
import expense_manager.models.user  # noqa: F401
import expense_manager.models.expense  # noqa: F401
import expense_manager.models.approval  # noqa: F401
import expense_manager.models.notification  # noqa: F401

from expense_manager.routes import auth, expense, approval, notification

logger = setup_logger()

WORKFLOW_STATUS_CODES = (
    (ExpenseNotFoundError, status.HTTP_404_NOT_FOUND),
    (ExpenseAccessDeniedError, status.HTTP_403_FORBIDDEN),
)


def error_response(status_code: int, message: str, headers=None, **extra) -> JSONResponse:
    """Build the ``{"success": false, "message": ...}`` body every error shares"""
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, **extra},
        headers=headers,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.APP_NAME} ({settings.ENVIRONMENT})...")

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready")

    if settings.DEV_MODE:
        db = SessionLocal()
        try:
            seed_dev_users(db)
        finally:
            db.close()

    yield

    logger.info(f"Shutting down {settings.APP_NAME}...")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Expense submission and two-step approval workflow",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return error_response(exc.status_code, exc.detail, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Flatten pydantic errors; the first one becomes the message"""
    errors = [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": error.get("msg", ""),
            "type": error.get("type", "")
        }
        for error in exc.errors()
    ]
    logger.warning(f"Validation error on {request.method} {request.url.path}: {errors}")

    message = f"Validation error: {errors[0]['msg']}" if errors else "Validation error"
    return error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, message, errors=errors)


@app.exception_handler(ExpenseWorkflowError)
async def workflow_exception_handler(request: Request, exc: ExpenseWorkflowError):
    """Lifecycle and ownership errors; anything not listed is a 400"""
    status_code = next(
        (code for error_type, code in WORKFLOW_STATUS_CODES if isinstance(exc, error_type)),
        status.HTTP_400_BAD_REQUEST
    )
    logger.warning(f"{exc.code} on {request.method} {request.url.path}: {exc}")
    return error_response(status_code, str(exc), code=exc.code)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error(f"Unhandled exception on {request.method} {request.url.path}")
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        detail=str(exc) if settings.DEBUG else "An error occurred"
    )


@app.get("/health", tags=["Health"])
async def health_check(db: Session = Depends(get_db)):
    """Reports ``degraded`` when the database does not answer"""
    try:
        db.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as e:
        logger.error(f"Health check database probe failed: {e}")
        database = "unavailable"

    return {
        "status": "healthy" if database == "ok" else "degraded",
        "database": database,
        "environment": settings.ENVIRONMENT,
        "version": settings.APP_VERSION,
        "timestamp": time.time()
    }


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/api/docs",
        "health": "/health"
    }


# Approval paths share /api/expenses and must match before /{expense_id}
app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(approval.router, prefix="/api/expenses", tags=["Approvals"])
app.include_router(expense.router, prefix="/api/expenses", tags=["Expenses"])
app.include_router(notification.router, prefix="/api/notifications", tags=["Notifications"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "expense_manager.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
