"""
Companies Service Package
"""
from .service import CompanyService

__all__ = ["CompanyService"]
