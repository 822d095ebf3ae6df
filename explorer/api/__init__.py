"""
API Layer

FastAPI surface over a single navigator session.
"""

from .server import create_app

__all__ = ['create_app']
