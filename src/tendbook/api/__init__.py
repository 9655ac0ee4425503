"""
tendbook REST API.

Usage::

    uvicorn tendbook.api.app:create_app --factory --port 3000
"""

from tendbook.api.app import create_app

__all__ = ["create_app"]
