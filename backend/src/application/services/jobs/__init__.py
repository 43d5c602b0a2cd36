"""
Jobs Service Package
"""
from .lifecycle import JobLifecycleService, posted_after

__all__ = [
    "JobLifecycleService",
    "posted_after",
]
