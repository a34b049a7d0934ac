"""
FastAPI entrypoint for SplitLedger backend application.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from splitledger.core.config import settings
from splitledger.core.logging import setup_logging
from splitledger.core.utils import format_error
from splitledger.db.session import init_db
from splitledger.api.router import api_router
from splitledger.services.split_service import InvalidSplitError

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables if they do not exist yet."""
    init_db()
    yield


app = FastAPI(
    title="SplitLedger API",
    description="Backend API for shared group expenses and balances",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidSplitError)
async def invalid_split_handler(request: Request, exc: InvalidSplitError):
    """Report split validation failures to the caller as-is."""
    logger.warning(f"Rejected split on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=format_error(str(exc))
    )


# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"message": "SplitLedger API is running"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
