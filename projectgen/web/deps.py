from __future__ import annotations
from fastapi import Request

from projectgen.config import Settings
from projectgen.services.pipeline import GenerationPipeline
from projectgen.services.registry import JobRegistry

def get_registry(request: Request) -> JobRegistry:
    return request.app.state.registry

def get_pipeline(request: Request) -> GenerationPipeline:
    return request.app.state.pipeline

def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
