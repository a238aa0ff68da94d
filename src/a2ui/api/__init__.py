"""HTTP API."""

from .app import ActionRequest, create_app, main

__all__ = ["ActionRequest", "create_app", "main"]
