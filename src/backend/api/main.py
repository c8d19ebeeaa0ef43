"""
FastAPI server for PromptQL natural-language-to-SQL queries.

This module handles application setup, lifespan management, and middleware configuration.
Route handlers are organized in the routers/ package.

Pipeline clients (schema builder, LLM provider, Hasura executor) are
created once in the lifespan, stored on ``app.state`` and closed on shutdown.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from api.dependencies import get_optional_clients, is_database_connected
from api.models import HealthResponse
from api.routers import promptql_router
from api.routers.promptql import error_response
from config.settings import get_settings
from dotenv import load_dotenv
from entities.workflow import PipelineClients, open_pipeline_clients
from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

load_dotenv()

# Configure logging - use force=True to prevent duplicate handlers
logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO, force=True)

# Reduce noise from HTTP and SDK libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("openai").setLevel(logging.WARNING)
logging.getLogger("anthropic").setLevel(logging.WARNING)

SERVICE_NAME = "promptql"


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.

    Opens the pipeline clients on startup, probes Hasura once, and closes
    every connection on shutdown. A failed probe or a missing LLM key is
    logged and reported by ``/health``; it does not stop the server.
    """
    settings = get_settings()

    async with open_pipeline_clients(settings) as clients:
        application.state.clients = clients

        llm_name = clients.llm_provider.provider_name if clients.llm_provider else None
        logger.info("PromptQL server starting")
        logger.info("LLM Provider: %s", llm_name or "NOT CONFIGURED")
        logger.info("Hasura: %s", settings.hasura_graphql_endpoint)

        connected = await clients.sql_executor.test_connection()
        application.state.database_connected = connected
        if connected:
            logger.info("Hasura connection successful")
        else:
            logger.warning("Could not connect to Hasura. Queries will fail.")

        yield

        application.state.clients = None

    logger.info("Application shutdown complete")


# Create FastAPI application
app = FastAPI(title="ClaimSight PromptQL", lifespan=lifespan)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_allow_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(promptql_router)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer malformed bodies with 400 instead of FastAPI's default 422."""
    if any(err.get("type") == "json_invalid" for err in exc.errors()):
        return error_response(status.HTTP_400_BAD_REQUEST, "Request body must be valid JSON")
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "Invalid request body",
        validation_errors=[str(err.get("msg", "")) for err in exc.errors()],
    )


@app.get("/health", response_model=HealthResponse)
async def health_check(
    clients: PipelineClients | None = Depends(get_optional_clients),
    database_connected: bool = Depends(is_database_connected),
) -> HealthResponse:
    """Health check endpoint."""
    llm_provider = clients.llm_provider if clients else None
    healthy = llm_provider is not None and database_connected
    return HealthResponse(
        status="ok" if healthy else "degraded",
        service=SERVICE_NAME,
        llm_provider=llm_provider.provider_name if llm_provider else None,
    )


if __name__ == "__main__":
    uvicorn.run("api.main:app", host="0.0.0.0", port=get_settings().promptql_port, reload=True)  # noqa: S104
