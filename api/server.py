"""
Team Health Plans API Server - REST API for the plan builder and plan board.
"""

import logging
import os
from datetime import datetime

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.builder_router import router as builder_router
from api.plan_router import router as plan_router
from api.response_models import HealthResponse
from teamplan import config
from teamplan.observability import CorrelationIdMiddleware, configure_logging

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Team Health Plans API",
    description="Improvement plan builder and plan lifecycle board",
    version="1.0.0",
)

# CORS middleware - configurable via CORS_ORIGINS env var
cors_origins_env = os.getenv("CORS_ORIGINS", "*")
cors_origins = (
    ["*"] if cors_origins_env == "*" else [o.strip() for o in cors_origins_env.split(",")]
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(CorrelationIdMiddleware)

app.include_router(builder_router)
app.include_router(plan_router)


@app.get("/api/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}


def main():
    configure_logging(config.LOG_LEVEL)
    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "8420"))
    logger.info(f"Starting API server on {host}:{port}")
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
