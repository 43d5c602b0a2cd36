"""
E-mail Service Package
"""
from .interfaces import IEmailService

__all__ = ["IEmailService"]
