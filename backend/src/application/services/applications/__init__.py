"""
Applications Service Package
"""
from .lifecycle import ApplicationLifecycleService

__all__ = ["ApplicationLifecycleService"]
