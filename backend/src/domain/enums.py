"""
Domain Enums
Business enumerations for the job board
"""
from enum import Enum


class UserType(str, Enum):
    """Account roles"""
    JOB_SEEKER = "job_seeker"
    EMPLOYER = "employer"
    ADMIN = "admin"


class JobType(str, Enum):
    """Job type classifications"""
    FULL_TIME = "Full-time"
    PART_TIME = "Part-time"
    CONTRACT = "Contract"
    TEMPORARY = "Temporary"
    FREELANCE = "Freelance"
    INTERNSHIP = "Internship"


class ExperienceLevel(str, Enum):
    """Experience level classifications"""
    ENTRY = "Entry Level"
    MID = "Mid Level"
    SENIOR = "Senior"
    EXECUTIVE = "Executive"


class JobCategory(str, Enum):
    """Job categories"""
    IT = "IT"
    FINANCE = "Finance"
    HEALTHCARE = "Healthcare"
    SALES = "Sales"
    MARKETING = "Marketing"
    OPERATIONS = "Operations"
    HR = "HR"
    OTHER = "Other"


class Currency(str, Enum):
    """Salary currencies"""
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    INR = "INR"
    AUD = "AUD"
    ILS = "ILS"


class SalaryType(str, Enum):
    """How a salary figure is expressed"""
    HOURLY = "Hourly"
    ANNUAL = "Annual"
    CONTRACT = "Contract"


class CompanyIndustry(str, Enum):
    """Company industries"""
    TECHNOLOGY = "Technology"
    FINANCE = "Finance"
    HEALTHCARE = "Healthcare"
    RETAIL = "Retail"
    MANUFACTURING = "Manufacturing"
    OTHER = "Other"


class CompanySize(str, Enum):
    """Company size buckets"""
    STARTUP = "Startup"
    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"
    ENTERPRISE = "Enterprise"


class NotificationType(str, Enum):
    """In-app notification kinds"""
    APPLICATION_UPDATE = "application_update"
    JOB_MATCH = "job_match"
    NEW_MESSAGE = "new_message"
    PROFILE_UPDATE = "profile_update"
    COMPANY_UPDATE = "company_update"
    NEW_APPLICATION = "new_application"
    SYSTEM = "system"


class DatePosted(str, Enum):
    """Window filter for job listings"""
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
