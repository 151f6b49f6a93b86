"""Request-scoped access to the services created at startup."""
from fastapi import Request

from src.core.config import Settings
from src.services.conversion import ConversionService
from src.services.registry import PresentationRegistry


def get_registry(request: Request) -> PresentationRegistry:
    return request.app.state.registry


def get_conversion_service(request: Request) -> ConversionService:
    return request.app.state.conversion_service


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
