"""
Saved Jobs Service Package
"""
from .service import SavedJobService

__all__ = ["SavedJobService"]
