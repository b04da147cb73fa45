"""
API Dependencies

Dependency injection for the API. The pipeline, content service and
storage gateway are built once in create_app() and shared by every
request through app.state.
"""

from __future__ import annotations

from fastapi import Request

from core.config.runtime import RuntimeConfig
from orchestrator.content import ContentService
from orchestrator.pipeline import StagePipeline


def get_pipeline(request: Request) -> StagePipeline:
    return request.app.state.pipeline


def get_content_service(request: Request) -> ContentService:
    return request.app.state.content


def get_runtime_config(request: Request) -> RuntimeConfig:
    return request.app.state.config
