"""Main FastAPI application entry point."""

import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from labmind.config import config
from labmind.routes import analyze
from labmind.routes import config as config_routes

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

# Set specific loggers to appropriate levels
logging.getLogger("labmind").setLevel(logging.INFO)
logging.getLogger("langchain").setLevel(logging.WARNING)
logging.getLogger("langgraph").setLevel(logging.INFO)
logging.getLogger("anthropic").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan handler."""
    llm_config = config.get_llm_config()
    logger.info(f"Starting {app.title} v{app.version}")
    logger.info(f"Default LLM: {llm_config['provider']}/{llm_config['model']}")

    if config.get_api_key(llm_config["provider"]) is None:
        env_var = config.get_api_key_env_var(llm_config["provider"])
        logger.warning(f"{env_var} not set; analysis requests will fail until it is configured")

    yield

    logger.info(f"Shutting down {app.title}")


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are reported as 400 with the validation details."""
    logger.info(f"Rejected request to {request.url.path}: {len(exc.errors())} validation errors")
    return JSONResponse(
        status_code=400,
        content={
            "error": "Invalid request format",
            "details": jsonable_encoder(exc.errors()),
        },
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app_config = config.yaml_config.get("app", {})

    app = FastAPI(
        title=app_config.get("name", "LabMind Analysis Service"),
        version=app_config.get("version", "1.0.0"),
        description="Tool-augmented statistical analysis of research datasets",
        lifespan=lifespan,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Include routers
    app.include_router(analyze.router, prefix="/api")
    app.include_router(config_routes.router, prefix="/api")

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "name": app_config.get("name", "LabMind Analysis Service"),
            "version": app_config.get("version", "1.0.0"),
            "docs": "/docs",
        }

    @app.get("/health")
    async def health():
        """Simple health check."""
        return {"status": "healthy"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "labmind.main:app",
        host=config.settings.host,
        port=config.settings.port,
        reload=config.settings.debug,
    )
