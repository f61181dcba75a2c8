"""HTTP surface for the workflow engine."""

from .app import create_app, main
from .handlers import handle_execute_request
from .routes import router

__all__ = ["create_app", "main", "handle_execute_request", "router"]
