"""
WorkforcePilot API

REST API for deterministic workforce scenario evaluation.

Endpoints:
    POST /evaluate              - Evaluate a scenario
    POST /evaluate/recompute    - Re-weight stored component scores
    POST /weights/normalize     - Change one weight and rebalance the rest
    POST /sequencing/events     - Apply recommended sequencing to events
    POST /sequencing/preview    - Fast projection of sequencing
    POST /sequencing/compare    - Full re-evaluation of sequenced events
    POST /brief                 - Deterministic executive brief
    GET  /presets               - Demo scenarios
    GET  /reference/policies    - Policy rule catalog
    GET  /reference/evidence    - Evidence catalog
    GET  /health                - Liveness probe
    GET  /version               - Version info
"""

import json
import logging
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.config import (
    API_VERSION,
    WFP_DOCS_ENABLED,
    WFP_ENGINE_VERSION,
    WFP_LOG_LEVEL,
    WFP_PACK_PATH,
    WFP_STRICT_SCHEMA,
)
from api.routes import brief, evaluate, presets, reference, sequencing, weights
from api.schemas.responses import ErrorResponse, HealthResponse, VersionResponse
from workforcepilot.canon import compute_reference_pack_hash
from workforcepilot.engine import ScenarioEvaluator
from workforcepilot.exceptions import (
    InvalidScenarioError,
    InvalidWeightsError,
    WorkforcePilotError,
)
from workforcepilot.models import ReferenceTables
from workforcepilot.packs import ReferencePackLoader, SCHEMA_VERSION

# =============================================================================
# Logging
# =============================================================================

class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    EXTRA_FIELDS = (
        "request_id",
        "scenario_fingerprint",
        "event_count",
        "ofs",
        "duration_ms",
    )

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in self.EXTRA_FIELDS:
            if hasattr(record, name):
                log_entry[name] = getattr(record, name)
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


# Configure logging
logger = logging.getLogger("workforcepilot")
logger.setLevel(getattr(logging, WFP_LOG_LEVEL.upper()))
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())
    logger.addHandler(handler)

# =============================================================================
# Reference Pack
# =============================================================================

REFERENCE_TABLES: Optional[ReferenceTables] = None
REFERENCE_PACK_HASH = ""


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the reference pack on startup."""
    global REFERENCE_TABLES, REFERENCE_PACK_HASH

    loader = ReferencePackLoader(strict_version=WFP_STRICT_SCHEMA)
    try:
        tables = loader.load(WFP_PACK_PATH)
    except WorkforcePilotError as e:
        logger.error("Failed to load reference pack: %s", e)
        raise

    REFERENCE_TABLES = tables
    REFERENCE_PACK_HASH = compute_reference_pack_hash(tables)
    logger.info(
        "Reference pack %s v%s ready (hash %s)",
        tables.pack_id,
        tables.pack_version,
        REFERENCE_PACK_HASH[:16],
    )

    # Share tables with routes
    evaluate.set_evaluator(ScenarioEvaluator(tables))
    reference.set_tables(tables)

    yield

    logger.info("Shutting down")


# =============================================================================
# FastAPI App
# =============================================================================

app = FastAPI(
    title="WorkforcePilot API",
    description="""
**Deterministic workforce scenario evaluation.**

WorkforcePilot evaluates planned workforce actions (contractor conversions,
terminations, relocations, EOR onboarding) against an illustrative policy
library and returns modeled risk signals. Not legal advice.

## Quick Start

1. `GET /presets` - See the demo scenarios
2. `POST /evaluate` - Evaluate a scenario
3. `POST /evaluate/recompute` - Re-weight without re-running the engine
4. `POST /brief` - Executive brief
    """,
    version=API_VERSION,
    docs_url="/docs" if WFP_DOCS_ENABLED else None,
    redoc_url="/redoc" if WFP_DOCS_ENABLED else None,
    openapi_url="/openapi.json" if WFP_DOCS_ENABLED else None,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# Include routers
app.include_router(evaluate.router)
app.include_router(weights.router)
app.include_router(sequencing.router)
app.include_router(brief.router)
app.include_router(presets.router)
app.include_router(reference.router)

# =============================================================================
# Middleware
# =============================================================================

@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Add request ID to all requests."""
    request_id = str(uuid.uuid4())[:8]
    request.state.request_id = request_id
    started = time.perf_counter()

    response = await call_next(request)

    response.headers["X-Request-ID"] = request_id
    logger.debug(
        "%s %s -> %d",
        request.method,
        request.url.path,
        response.status_code,
        extra={
            "request_id": request_id,
            "duration_ms": round((time.perf_counter() - started) * 1000, 2),
        },
    )
    return response

# =============================================================================
# Error Handling
# =============================================================================

_UNPROCESSABLE = (InvalidScenarioError, InvalidWeightsError)


@app.exception_handler(WorkforcePilotError)
async def workforcepilot_error_handler(request: Request, exc: WorkforcePilotError):
    """Map domain errors to a 4xx JSON body."""
    status_code = 422 if isinstance(exc, _UNPROCESSABLE) else 400
    logger.warning(
        "Request rejected: %s",
        exc,
        extra={"request_id": getattr(request.state, "request_id", None)},
    )
    body = ErrorResponse(**exc.to_dict())
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))

# =============================================================================
# Health Endpoints
# =============================================================================

@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Liveness probe."""
    return HealthResponse(
        status="healthy",
        engine_version=WFP_ENGINE_VERSION,
        reference_pack_loaded=REFERENCE_TABLES is not None,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@app.get("/version", response_model=VersionResponse, tags=["Info"])
async def version_info():
    """Engine and reference pack versions."""
    return VersionResponse(
        engine_version=WFP_ENGINE_VERSION,
        api_version=API_VERSION,
        reference_pack_id=REFERENCE_TABLES.pack_id if REFERENCE_TABLES else "",
        reference_pack_version=REFERENCE_TABLES.pack_version if REFERENCE_TABLES else "",
        reference_pack_hash=REFERENCE_PACK_HASH,
        schema_version=SCHEMA_VERSION,
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
