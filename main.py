"""
main.py
-------
Entry point for the finance tracker API.

Responsibilities:
    - Initialize the database connection pool and schema.
    - Build the FastAPI application with all routers.
    - Map application errors to JSON error responses.
    - Optionally run a one-off recurring sweep for every user (for cron).
"""

import argparse
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import API_HOST, API_PORT, CORS_ORIGINS
from db.connection import check_connection, close_pool, init_pool
from db.init_db import create_tables
from handlers import analytics_handler, auth_handler, budget_handler, recurring_handler, transaction_handler
from services.recurring_executor import RecurringExecutor
from utils.errors import FinanceError
from utils.logger import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ── 1. Database setup ─────────────────────────────────
    logger.info("Initializing database...")
    init_pool()
    create_tables()
    logger.info("Finance tracker API is running.")
    yield
    # ── 2. Cleanup on shutdown ────────────────────────────
    close_pool()
    logger.info("Finance tracker API stopped.")


app = FastAPI(title="Personal Finance Tracker API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_handler.router)
app.include_router(transaction_handler.router)
app.include_router(recurring_handler.router)
app.include_router(budget_handler.router)
app.include_router(analytics_handler.router)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"status": "error", "message": message})


@app.exception_handler(FinanceError)
async def finance_error_handler(request: Request, exc: FinanceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return _error(exc.status_code, "Server error, please try again")
    return _error(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    loc = first.get("loc", ())
    field = str(loc[1]) if len(loc) > 1 else "request"
    return _error(400, f"Invalid value for {field}: {first.get('msg', 'invalid input')}")


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = "Route not found" if exc.status_code == 404 else str(exc.detail)
    return _error(exc.status_code, message)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return _error(500, "Server error, please try again")


@app.get("/api/health")
def health() -> dict:
    database = "up" if check_connection() else "down"
    return {"status": "ok", "message": "Finance tracker API is running", "database": database}


def run_sweep() -> int:
    """Execute due recurring rules for every user once."""
    init_pool()
    try:
        created = RecurringExecutor().run_for_all()
        logger.info(f"Recurring sweep created {created} entries.")
        return created
    finally:
        close_pool()


def main() -> None:
    """Run the API server, or a one-off recurring sweep with --sweep."""
    parser = argparse.ArgumentParser(description="Personal finance tracker API")
    parser.add_argument("--sweep", action="store_true", help="run due recurring rules for all users and exit")
    args = parser.parse_args()

    if args.sweep:
        run_sweep()
        return

    uvicorn.run(app, host=API_HOST, port=API_PORT)


if __name__ == "__main__":
    main()
