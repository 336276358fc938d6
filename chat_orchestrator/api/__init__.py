"""
FastAPI server module for the chat orchestrator.
"""

from .main import app, create_app

__all__ = ["app", "create_app"]
