"""
Company Endpoints
/api/v1/companies/* routes
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from domain.entities import User
from domain.enums import CompanyIndustry, UserType
from application.repositories.interfaces import JobSearchCriteria
from application.services.companies import CompanyService
from application.services.dashboards import DashboardService
from application.services.jobs import JobLifecycleService
from application.services.pagination import PageRequest
from application.services.reviews import ReviewService
from presentation.api.v1.container import (
    get_company_service,
    get_dashboard_service,
    get_job_lifecycle,
    get_review_service,
)
from presentation.api.v1.dependencies import get_current_user, require_role
from presentation.api.v1.schemas.common import ApiResponse, ok, paginated
from presentation.api.v1.schemas.company import CompanyCreateRequest, CompanyResponse, CompanyUpdateRequest
from presentation.api.v1.schemas.dashboard import CompanyDashboardResponse
from presentation.api.v1.schemas.job import JobResponse
from presentation.api.v1.schemas.review import ReviewResponse


router = APIRouter()


@router.get("", response_model=ApiResponse[List[CompanyResponse]])
async def list_companies(
    search: Optional[str] = None,
    industry: Optional[CompanyIndustry] = None,
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    companies: CompanyService = Depends(get_company_service),
):
    result = await companies.list_companies(search, industry, PageRequest.of(page, limit))
    return paginated(result, CompanyResponse.model_validate)


@router.get("/employer/my-company", response_model=ApiResponse[CompanyResponse])
async def my_company(
    current_user: User = Depends(require_role(UserType.EMPLOYER)),
    companies: CompanyService = Depends(get_company_service),
):
    return ok(CompanyResponse.model_validate(await companies.get_company_for_owner(current_user.id)))


@router.post("", response_model=ApiResponse[CompanyResponse], status_code=status.HTTP_201_CREATED)
async def create_company(
    body: CompanyCreateRequest,
    current_user: User = Depends(get_current_user),
    companies: CompanyService = Depends(get_company_service),
):
    company = await companies.create_company(current_user, body.model_dump(exclude_none=True))
    return ok(CompanyResponse.model_validate(company), "Company created successfully")


@router.get("/{identifier}", response_model=ApiResponse[CompanyResponse])
async def get_company(
    identifier: str,
    companies: CompanyService = Depends(get_company_service),
):
    """Look up by id or slug"""
    return ok(CompanyResponse.model_validate(await companies.get_company(identifier)))


@router.get("/{identifier}/jobs", response_model=ApiResponse[List[JobResponse]])
async def company_jobs(
    identifier: str,
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    companies: CompanyService = Depends(get_company_service),
    jobs: JobLifecycleService = Depends(get_job_lifecycle),
):
    company = await companies.get_company(identifier)
    result = await jobs.list_jobs(JobSearchCriteria(company_id=company.id), PageRequest.of(page, limit))
    return paginated(result, JobResponse.from_entity)


@router.get("/{identifier}/reviews", response_model=ApiResponse[List[ReviewResponse]])
async def company_reviews(
    identifier: str,
    rating: Optional[int] = Query(None, ge=1, le=5),
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    companies: CompanyService = Depends(get_company_service),
    reviews: ReviewService = Depends(get_review_service),
):
    company = await companies.get_company(identifier)
    result = await reviews.list_company_reviews(company.id, rating, PageRequest.of(page, limit))
    return paginated(result, ReviewResponse.model_validate)


@router.put("/{identifier}", response_model=ApiResponse[CompanyResponse])
async def update_company(
    identifier: str,
    body: CompanyUpdateRequest,
    current_user: User = Depends(get_current_user),
    companies: CompanyService = Depends(get_company_service),
):
    company = await companies.get_company(identifier)
    updated = await companies.update_company(company.id, current_user.id, body.model_dump(exclude_unset=True))
    return ok(CompanyResponse.model_validate(updated), "Company updated successfully")


@router.delete("/{identifier}", response_model=ApiResponse[None])
async def delete_company(
    identifier: str,
    current_user: User = Depends(get_current_user),
    companies: CompanyService = Depends(get_company_service),
):
    company = await companies.get_company(identifier)
    await companies.delete_company(company.id, current_user.id)
    return ok(message="Company deleted successfully")


@router.get("/{identifier}/dashboard", response_model=ApiResponse[CompanyDashboardResponse])
async def company_dashboard(
    identifier: str,
    current_user: User = Depends(get_current_user),
    companies: CompanyService = Depends(get_company_service),
    dashboards: DashboardService = Depends(get_dashboard_service),
):
    company = await companies.get_company(identifier)
    dashboard = await dashboards.company_dashboard(company.id, current_user.id)
    return ok(CompanyDashboardResponse.from_dashboard(dashboard, current_user))


@router.post("/{identifier}/verify", response_model=ApiResponse[CompanyResponse])
async def request_verification(
    identifier: str,
    current_user: User = Depends(get_current_user),
    companies: CompanyService = Depends(get_company_service),
):
    company = await companies.get_company(identifier)
    requested = await companies.request_verification(company.id, current_user.id)
    return ok(
        CompanyResponse.model_validate(requested),
        "Verification request submitted successfully. We will review your request within 24-48 hours.",
    )


@router.post("/{identifier}/approve-verification", response_model=ApiResponse[CompanyResponse])
async def approve_verification(
    identifier: str,
    current_user: User = Depends(require_role(UserType.ADMIN)),
    companies: CompanyService = Depends(get_company_service),
):
    company = await companies.get_company(identifier)
    verified = await companies.approve_verification(company.id, current_user)
    return ok(CompanyResponse.model_validate(verified), "Company verified successfully")
