"""
Dashboards Service Package
"""
from .service import CompanyDashboard, DashboardService, JobAnalytics, UserDashboard

__all__ = ["CompanyDashboard", "DashboardService", "JobAnalytics", "UserDashboard"]
