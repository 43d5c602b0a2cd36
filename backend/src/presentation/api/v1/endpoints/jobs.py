"""
Job Endpoints
/api/v1/jobs/* routes
"""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from core.config import settings
from domain.entities import User
from domain.enums import DatePosted, ExperienceLevel, JobCategory, JobType, UserType
from domain.value_objects import ApplicationStatus, JobStatus
from application.repositories.interfaces import JobSearchCriteria
from application.services.applications import ApplicationLifecycleService
from application.services.dashboards import DashboardService
from application.services.jobs import JobLifecycleService, posted_after
from application.services.pagination import PageRequest
from presentation.api.v1.container import get_application_lifecycle, get_dashboard_service, get_job_lifecycle
from presentation.api.v1.dependencies import get_current_user, get_optional_user, limiter, require_role
from presentation.api.v1.schemas.application import EmployerApplicationResponse
from presentation.api.v1.schemas.common import ApiResponse, ok, paginated
from presentation.api.v1.schemas.dashboard import JobAnalyticsResponse
from presentation.api.v1.schemas.job import (
    JobCreateRequest,
    JobResponse,
    JobStatsResponse,
    JobUpdateRequest,
)


router = APIRouter()


def search_criteria(
    search: Optional[str] = None,
    category: Optional[JobCategory] = None,
    job_type: Optional[JobType] = None,
    experience_level: Optional[ExperienceLevel] = None,
    city: Optional[str] = Query(None, alias="location"),
    is_remote: Optional[bool] = None,
    company_id: Optional[UUID] = None,
    min_salary: Optional[int] = Query(None, ge=0),
    max_salary: Optional[int] = Query(None, ge=0),
    date_posted: Optional[DatePosted] = None,
    sort: str = Query("-created_at", description="Column name, '-' prefix for descending"),
) -> JobSearchCriteria:
    """Query-string filters for the public listing"""
    return JobSearchCriteria(
        search=search,
        category=category,
        job_type=job_type,
        experience_level=experience_level,
        city=city,
        is_remote=is_remote,
        company_id=company_id,
        min_salary=min_salary,
        max_salary=max_salary,
        posted_after=posted_after(date_posted),
        sort_by=sort.lstrip("-"),
        descending=sort.startswith("-"),
    )


@router.get("", response_model=ApiResponse[List[JobResponse]])
async def list_jobs(
    criteria: JobSearchCriteria = Depends(search_criteria),
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    jobs: JobLifecycleService = Depends(get_job_lifecycle),
):
    result = await jobs.list_jobs(criteria, PageRequest.of(page, limit))
    return paginated(result, JobResponse.from_entity)


@router.get("/search", response_model=ApiResponse[List[JobResponse]])
async def search_jobs(
    criteria: JobSearchCriteria = Depends(search_criteria),
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    jobs: JobLifecycleService = Depends(get_job_lifecycle),
):
    result = await jobs.list_jobs(criteria, PageRequest.of(page, limit))
    return paginated(result, JobResponse.from_entity)


@router.get("/stats", response_model=ApiResponse[JobStatsResponse])
async def job_stats(jobs: JobLifecycleService = Depends(get_job_lifecycle)):
    return ok(JobStatsResponse(**await jobs.job_stats()))


@router.get("/trending", response_model=ApiResponse[List[JobResponse]])
async def trending_jobs(
    limit: int = Query(10, ge=1, le=50),
    jobs: JobLifecycleService = Depends(get_job_lifecycle),
):
    return ok([JobResponse.from_entity(job) for job in await jobs.trending_jobs(limit)])


@router.get("/employer/my-jobs", response_model=ApiResponse[List[JobResponse]])
async def my_jobs(
    status: Optional[JobStatus] = None,
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    current_user: User = Depends(require_role(UserType.EMPLOYER)),
    jobs: JobLifecycleService = Depends(get_job_lifecycle),
):
    result = await jobs.list_employer_jobs(current_user.id, status, PageRequest.of(page, limit))
    return paginated(result, lambda job: JobResponse.from_entity(job, current_user.id))


@router.post("", response_model=ApiResponse[JobResponse], status_code=status.HTTP_201_CREATED)
@limiter.limit(
    settings.RATE_LIMIT_JOB_POSTINGS,
    error_message="You have reached the maximum number of job postings per hour.",
)
async def create_job(
    request: Request,
    body: JobCreateRequest,
    current_user: User = Depends(require_role(UserType.EMPLOYER)),
    jobs: JobLifecycleService = Depends(get_job_lifecycle),
):
    job = await jobs.create_job(body.model_dump(exclude_none=True), current_user.id)
    return ok(JobResponse.from_entity(job, current_user.id), "Job created successfully")


@router.get("/{job_id}", response_model=ApiResponse[JobResponse])
async def get_job(
    job_id: UUID,
    current_user: Optional[User] = Depends(get_optional_user),
    jobs: JobLifecycleService = Depends(get_job_lifecycle),
):
    viewer_id = current_user.id if current_user else None
    job = await jobs.get_job(job_id, viewer_id)
    return ok(JobResponse.from_entity(job, viewer_id))


@router.put("/{job_id}", response_model=ApiResponse[JobResponse])
async def update_job(
    job_id: UUID,
    body: JobUpdateRequest,
    current_user: User = Depends(get_current_user),
    jobs: JobLifecycleService = Depends(get_job_lifecycle),
):
    job = await jobs.update_job(job_id, body.model_dump(exclude_unset=True), current_user.id)
    return ok(JobResponse.from_entity(job, current_user.id), "Job updated successfully")


@router.delete("/{job_id}", response_model=ApiResponse[None])
async def delete_job(
    job_id: UUID,
    current_user: User = Depends(get_current_user),
    jobs: JobLifecycleService = Depends(get_job_lifecycle),
):
    await jobs.delete_job(job_id, current_user.id)
    return ok(message="Job deleted successfully")


@router.post("/{job_id}/publish", response_model=ApiResponse[JobResponse])
async def publish_job(
    job_id: UUID,
    current_user: User = Depends(get_current_user),
    jobs: JobLifecycleService = Depends(get_job_lifecycle),
):
    job = await jobs.publish_job(job_id, current_user.id)
    return ok(JobResponse.from_entity(job, current_user.id), "Job published successfully")


@router.post("/{job_id}/unpublish", response_model=ApiResponse[JobResponse])
async def unpublish_job(
    job_id: UUID,
    current_user: User = Depends(get_current_user),
    jobs: JobLifecycleService = Depends(get_job_lifecycle),
):
    job = await jobs.unpublish_job(job_id, current_user.id)
    return ok(JobResponse.from_entity(job, current_user.id), "Job unpublished successfully")


@router.post("/{job_id}/close", response_model=ApiResponse[JobResponse])
async def close_job(
    job_id: UUID,
    current_user: User = Depends(get_current_user),
    jobs: JobLifecycleService = Depends(get_job_lifecycle),
):
    job = await jobs.close_job(job_id, current_user.id)
    return ok(JobResponse.from_entity(job, current_user.id), "Job closed successfully")


@router.post("/{job_id}/view", response_model=ApiResponse[None])
async def record_view(
    job_id: UUID,
    jobs: JobLifecycleService = Depends(get_job_lifecycle),
):
    await jobs.increment_views(job_id)
    return ok(message="View recorded")


@router.get("/{job_id}/applications", response_model=ApiResponse[List[EmployerApplicationResponse]])
async def job_applications(
    job_id: UUID,
    status: Optional[ApplicationStatus] = None,
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    applications: ApplicationLifecycleService = Depends(get_application_lifecycle),
):
    result = await applications.list_job_applications(
        job_id, current_user.id, status, PageRequest.of(page, limit)
    )
    return paginated(result, EmployerApplicationResponse.model_validate)


@router.get("/{job_id}/analytics", response_model=ApiResponse[JobAnalyticsResponse])
async def job_analytics(
    job_id: UUID,
    current_user: User = Depends(get_current_user),
    dashboards: DashboardService = Depends(get_dashboard_service),
):
    return ok(JobAnalyticsResponse.from_analytics(await dashboards.job_analytics(job_id, current_user.id)))
