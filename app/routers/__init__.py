"""
API Routers
Separate router modules for each domain.
"""

from app.routers import preconditions

__all__ = ["preconditions"]
