"""
FastAPI Server for Accounting Law Search.

This package provides a thin HTTP wrapper around the corpus store, the
search engine and the chat orchestrator.
"""

from .main import app, create_app
from .dependencies import Services, build_services
from .config import Settings, get_settings

__all__ = [
    "app",
    "create_app",
    # Dependencies
    "Services",
    "build_services",
    # Config
    "Settings",
    "get_settings",
]
