"""FastAPI application for the Claim Checker service."""

import contextlib
import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Load environment variables from .env file
load_dotenv()

from ..domain.errors import PipelineError
from ..infrastructure.dependencies import get_service_container
from .endpoints import claims, health

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect providers on startup and release them on shutdown."""
    container = get_service_container()
    await container.startup()

    yield  # Application runs here

    await container.shutdown()


# Create FastAPI application
app = FastAPI(
    title="Claim Checker API",
    description="Claim extraction and web-evidence verification API",
    version="0.1.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PipelineError)
async def pipeline_error_handler(request: Request, exc: PipelineError) -> JSONResponse:
    """Report a failed pipeline stage as a server error."""
    logger.error(f"❌ {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": str(exc)})


# Include routers
app.include_router(health.router)
app.include_router(claims.router)
