# /gradeflow/main.py

import logging

# --- Core FastAPI Imports ---
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from . import config
from .db.base import Base
from .db.database import engine
from .routers import results_router, tasks_router, tests_router, transcripts_router
from .services.errors import GradingError, ValidationFailure, StateConflict, NotFound

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

# --- Application Lifecycle Management ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Runs once at startup: make sure every registered table exists.
    Base.metadata.create_all(bind=engine)
    yield

app = FastAPI(
    title="Gradeflow API",
    description="Grading evaluation and workflow engine for the academic records platform.",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Engine Failure Mapping ---
_STATUS_CODES = {
    ValidationFailure: 422,
    StateConflict: 409,
    NotFound: 404,
}

@app.exception_handler(GradingError)
async def grading_error_handler(request: Request, exc: GradingError):
    status_code = next((code for cls, code in _STATUS_CODES.items() if isinstance(exc, cls)), 400)
    logger.info("%s %s rejected with %s: %s", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(status_code=status_code, content={"detail": exc.to_dict()})

# --- API Router Inclusion ---
app.include_router(tests_router.router, prefix="/api/tests", tags=["Tests"])
app.include_router(tasks_router.router, prefix="/api/tasks", tags=["Tasks"])
app.include_router(transcripts_router.router, prefix="/api/transcripts", tags=["Transcripts"])
app.include_router(results_router.router, prefix="/api/student-test-results", tags=["Student Test Results"])

# --- Root / Health Check Endpoint ---
@app.get("/", tags=["Health Check"])
async def read_root():
    """A simple health check endpoint to confirm the API is online."""
    return {"status": "Gradeflow is running!", "version": app.version}
