"""
Document Generator Service - Main FastAPI Application
=====================================================
Renders document images from the fixed template.

Endpoints:
- POST /generate   - Render one document, returns PNG
- GET  /health     - Health check
- GET  /info       - Service information
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from composition import (
    AssetPaths,
    AssetStore,
    DocumentRenderer,
    FieldName,
    GenerationError,
    PlacementStrategy,
    ProfileConfig,
)

from api import __version__
from api.models.schemas import (
    GenerateRequest,
    ErrorResponse,
    HealthResponse,
    InfoResponse,
)


NO_CACHE = "no-cache, no-store, must-revalidate"
DOWNLOAD_NAME = "document.png"


# =============================================================================
# Global State
# =============================================================================

class ServiceState:
    """Startup-built, read-only state shared by all requests"""
    def __init__(self):
        self.renderer: Optional[DocumentRenderer] = None
        self.profile_config: Optional[ProfileConfig] = None

    def initialize(self):
        """
        Load the render profile and assets.

        Any failure propagates: the service must not start without its
        assets.
        """
        self.profile_config = ProfileConfig()
        assets = AssetStore.load(AssetPaths.from_env())
        self.renderer = DocumentRenderer(assets, self.profile_config.profile)
        logger.info("DocumentRenderer initialized")

    def reset(self):
        self.renderer = None
        self.profile_config = None


state = ServiceState()


# =============================================================================
# Lifespan Management
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup service resources"""
    logger.info("Starting Document Generator Service...")
    state.initialize()
    logger.info("Document Generator Service ready")
    yield
    logger.info("Shutting down Document Generator Service...")
    state.reset()


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="Document Generator Service",
    description="""
    Renders document images from a fixed template.

    ## Features
    - **Text Fields**: Jittered name, address and issuer text with per-occurrence font sizes
    - **Signature Stamp**: Lanczos-resized signature overlay
    - **Watermarks**: Rotated, faded background copies with configurable placement
    """,
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def no_cache_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["Cache-Control"] = NO_CACHE
    return response


# =============================================================================
# Error Handlers
# =============================================================================

def _validation_message(exc: RequestValidationError) -> str:
    """First human readable message of a request validation failure."""
    for error in exc.errors():
        ctx_error = (error.get("ctx") or {}).get("error")
        if ctx_error is not None:
            return str(ctx_error)
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "Invalid input data")
        return f"{location}: {message}" if location else message
    return "Invalid input data"


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(error=_validation_message(exc)).model_dump(),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=str(exc.detail)).model_dump(),
    )


# =============================================================================
# Health and Info Endpoints
# =============================================================================

@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check():
    """
    Health check endpoint.

    Reports whether assets are loaded and the template size.
    """
    renderer = state.renderer
    if renderer is None:
        return HealthResponse(status="unhealthy", assets_loaded=False)

    width, height = renderer.assets.template_size
    return HealthResponse(
        status="healthy",
        assets_loaded=True,
        template_width=width,
        template_height=height,
        watermark_placement=renderer.watermarks.strategy.value,
    )


@app.get("/info", response_model=InfoResponse, tags=["System"])
async def service_info():
    """
    Get service information and capabilities.
    """
    return InfoResponse(
        version=__version__,
        description="Document image generation from a fixed template",
        endpoints=[
            "POST /generate",
            "GET /health",
            "GET /info",
        ],
        fields=[f.value for f in FieldName],
        placement_strategies=[s.value for s in PlacementStrategy],
    )


# =============================================================================
# Generation Endpoint
# =============================================================================

@app.post(
    "/generate",
    tags=["Generation"],
    response_class=Response,
    responses={
        200: {"content": {"image/png": {}}, "description": "Rendered document"},
        400: {"model": ErrorResponse, "description": "Invalid input"},
        500: {"model": ErrorResponse, "description": "Generation failed"},
    },
)
async def generate_image(request: GenerateRequest):
    """
    Render one document.

    ## Parameters
    - **name**: Name, 1-100 characters after trimming
    - **address**: Address, 1-200 characters after trimming
    - **issuer**: Issuer, 1-100 characters after trimming

    ## Returns
    - PNG image with the template's dimensions
    """
    if state.renderer is None:
        raise HTTPException(status_code=503, detail="Renderer not initialized")

    logger.info(f"Processing generate request for: {request.name}")

    try:
        document = await asyncio.to_thread(state.renderer.render, request.to_fields())
    except GenerationError as e:
        logger.exception(f"Image generation failed: {e}")
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="Image generation failed").model_dump(),
        )

    return Response(
        content=document.data,
        media_type=document.media_type,
        headers={
            "Content-Disposition": f'inline; filename="{DOWNLOAD_NAME}"',
            "Cache-Control": NO_CACHE,
        },
    )


# =============================================================================
# Main Entry Point
# =============================================================================

def main():
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=3000,
        log_level="info",
    )


if __name__ == "__main__":
    main()
