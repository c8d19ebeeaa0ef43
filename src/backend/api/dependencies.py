"""
FastAPI dependencies for shared resources.
"""

import logging

from entities.workflow import PipelineClients
from fastapi import HTTPException, Request

logger = logging.getLogger(__name__)


def get_optional_clients(request: Request) -> PipelineClients | None:
    """Get the pipeline clients from app state, or None before startup completes."""
    return getattr(request.app.state, "clients", None)


def get_clients(request: Request) -> PipelineClients:
    """
    Get the pipeline clients from app state.

    Raises HTTPException 503 if not initialized.
    """
    clients = get_optional_clients(request)
    if clients is None:
        raise HTTPException(status_code=503, detail="PromptQL pipeline not initialized")
    return clients


def is_database_connected(request: Request) -> bool:
    """Result of the startup ``SELECT 1`` probe."""
    return bool(getattr(request.app.state, "database_connected", False))
