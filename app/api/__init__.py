"""
API Package

This package contains the HTTP routes of the service:
- handler: FastAPI route handlers for teams, users and pull requests
"""

from app.api.handler import router

__all__ = ["router"]
