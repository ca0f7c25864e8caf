"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from masterchef.api.dependencies import get_recipe_generator
from masterchef.api.routes import health, recipes, saved_recipes, users
from masterchef.config import settings
from masterchef.core.request_id import get_request_id
from masterchef.middleware.logging import RequestLoggingMiddleware
from masterchef.middleware.performance import PerformanceMiddleware
from masterchef.middleware.security import SecurityHeadersMiddleware, setup_compression, setup_cors
from masterchef.models.recipe import ErrorResponse, GenerateRecipeRequest, GenerateRecipeResponse
from masterchef.services.recipe_generator import RecipeGenerator
from masterchef.utils.exceptions import InvalidRequest, MasterChefException
from masterchef.utils.logging_config import setup_logging

setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("MasterChef API starting up...")
    logger.info(f"Log level: {settings.log_level}")
    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY is not set; recipe generation will answer 500 until it is")
    yield
    logger.info("MasterChef API shutting down...")


app = FastAPI(
    title="MasterChef API",
    description="Ingredient-to-recipe generation with Gemini and saved recipes on Firestore",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


def error_response(exc: MasterChefException) -> JSONResponse:
    body = ErrorResponse(
        error=exc.kind,
        message=exc.message,
        retryable=exc.retryable,
        request_id=get_request_id() or None,
    )
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies are client-fixable, same as a missing field."""
    logger.warning(
        f"Validation error: {str(exc)}",
        extra={
            "request_id": get_request_id(),
            "path": request.url.path,
            "method": request.method,
            "errors": exc.errors(),
        },
    )
    details = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}" for error in exc.errors()
    )
    return error_response(InvalidRequest(f"Request validation failed: {details}"))


@app.exception_handler(MasterChefException)
async def masterchef_exception_handler(request: Request, exc: MasterChefException) -> JSONResponse:
    """Handle custom MasterChef exceptions."""
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        f"Exception: {exc.kind}",
        extra={"request_id": get_request_id(), "path": request.url.path, "exception": exc.message},
        exc_info=exc.status_code >= 500,
    )
    return error_response(exc)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(
        f"Unexpected exception: {str(exc)}",
        extra={"request_id": get_request_id()},
        exc_info=True,
    )
    return error_response(MasterChefException("An unexpected error occurred"))


# Add middleware (last added runs first)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(PerformanceMiddleware, slow_request_threshold=5.0, very_slow_request_threshold=20.0)
app.add_middleware(RequestLoggingMiddleware)
setup_compression(app)
setup_cors(app)

# Include routers
app.include_router(health.router)
app.include_router(recipes.router)
app.include_router(saved_recipes.router)
app.include_router(users.router)


# =============================================================================
# Compatibility endpoint for the older frontend
# =============================================================================

@app.post(
    "/generate-recipe",
    response_model=GenerateRecipeResponse,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def generate_recipe_legacy(
    request: Request,
    body: GenerateRecipeRequest,
    recipe_generator: RecipeGenerator = Depends(get_recipe_generator),
) -> GenerateRecipeResponse:
    """
    Legacy path for recipe generation.
    Accepts `{"ingredients": "a, b, c", "systemPrompt": "..."}` and returns `{"recipe": "..."}`.
    """
    return await recipes.generate(request, body, recipe_generator)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "MasterChef API",
        "version": API_VERSION,
        "docs": "/docs",
    }


def run() -> None:
    """Console entry point: serve with uvicorn on the configured port."""
    import uvicorn

    uvicorn.run("masterchef.main:app", host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
