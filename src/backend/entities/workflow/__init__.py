"""Dependency wiring for the PromptQL pipeline."""

from .clients import (
    PipelineClients,
    create_hasura_http_client,
    create_llm_provider,
    open_pipeline_clients,
)

__all__ = [
    "PipelineClients",
    "create_hasura_http_client",
    "create_llm_provider",
    "open_pipeline_clients",
]
