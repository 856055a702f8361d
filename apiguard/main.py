"""
API Guardian FastAPI Application.

Static policy checks and auto-remediation for Next.js API route files:
  POST /review           → review supplied content
  POST /review/file      → review a file on disk
  POST /fix              → auto-fix a file on disk
  POST /scan             → review (and optionally fix) the whole endpoint tree
  GET  /stats            → project totals, no write-back
  GET  /audit            → recent audit entries
  POST /registry/refresh → rebuild the registry snapshot
  GET  /health           → {"status": "ok", ...}
"""

from __future__ import annotations

import logging

from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from apiguard.api.routes.health import VERSION
from apiguard.api.routes.health import router as health_router
from apiguard.api.routes.review import router as review_router
from apiguard.api.routes.scan import router as scan_router
from apiguard.config import settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("apiguard")

app = FastAPI(
    title="API Guardian",
    description="Policy checks and auto-remediation for API route handlers",
    version=VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(review_router)
app.include_router(scan_router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    body = await request.body()
    logger.error(f"Validation Error. Raw body: {body.decode('utf-8', errors='replace')[:500]} | Errors: {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={"detail": jsonable_encoder(exc.errors()), "body": body.decode("utf-8", errors="replace")[:100]},
    )
