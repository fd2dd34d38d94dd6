# finance_tracker/main.py
# FastAPI application: routers, middleware and error mapping

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from datetime import datetime
import logging

from . import models
from .config import CORS_ORIGINS, VERSION
from .dependencies import get_db
from .errors import ServiceError
from .routers import transactions, users

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Finance Tracker",
    description="Personal income and expense tracking API",
    version=VERSION
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Create database tables
models.create_tables()

# ===== ERROR MAPPING =====
@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    """Turn a tagged service failure into its HTTP status code."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

# ===== ROUTERS =====
app.include_router(users.router, tags=["auth"])
app.include_router(transactions.router, prefix="/transactions", tags=["transactions"])

# ===== HEALTH CHECK =====
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "version": VERSION
    }

__all__ = ["app", "get_db"]
