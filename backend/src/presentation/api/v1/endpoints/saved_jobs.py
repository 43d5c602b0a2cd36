"""
Saved Job Endpoints
/api/v1/saved-jobs/* routes
"""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from domain.entities import User
from application.services.pagination import PageRequest
from application.services.saved_jobs import SavedJobService
from presentation.api.v1.container import get_saved_job_service
from presentation.api.v1.dependencies import get_current_user
from presentation.api.v1.schemas.common import ApiResponse, ok, paginated
from presentation.api.v1.schemas.saved_job import (
    BulkRemoveRequest,
    CountResponse,
    SaveJobRequest,
    SavedCheckResponse,
    SavedJobResponse,
)


router = APIRouter()


@router.get("", response_model=ApiResponse[List[SavedJobResponse]])
async def list_saved_jobs(
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    saved_jobs: SavedJobService = Depends(get_saved_job_service),
):
    result = await saved_jobs.list_saved_jobs(current_user.id, PageRequest.of(page, limit))
    return paginated(result, lambda item: SavedJobResponse.from_entity(*item))


@router.post("", response_model=ApiResponse[SavedJobResponse], status_code=status.HTTP_201_CREATED)
async def save_job(
    body: SaveJobRequest,
    current_user: User = Depends(get_current_user),
    saved_jobs: SavedJobService = Depends(get_saved_job_service),
):
    saved = await saved_jobs.save_job(current_user, body.job_id, body.notes)
    return ok(SavedJobResponse.from_entity(saved), "Job saved successfully")


@router.get("/count", response_model=ApiResponse[CountResponse])
async def count_saved_jobs(
    current_user: User = Depends(get_current_user),
    saved_jobs: SavedJobService = Depends(get_saved_job_service),
):
    return ok(CountResponse(count=await saved_jobs.count_saved(current_user.id)))


@router.delete("/bulk", response_model=ApiResponse[CountResponse])
async def bulk_remove(
    body: BulkRemoveRequest,
    current_user: User = Depends(get_current_user),
    saved_jobs: SavedJobService = Depends(get_saved_job_service),
):
    removed = await saved_jobs.bulk_remove(current_user.id, body.job_ids)
    return ok(CountResponse(count=removed), f"{removed} jobs removed from saved list")


@router.get("/check/{job_id}", response_model=ApiResponse[SavedCheckResponse])
async def check_saved(
    job_id: UUID,
    current_user: User = Depends(get_current_user),
    saved_jobs: SavedJobService = Depends(get_saved_job_service),
):
    saved = await saved_jobs.is_saved(current_user.id, job_id)
    if saved is None:
        return ok(SavedCheckResponse(is_saved=False))
    return ok(SavedCheckResponse(is_saved=True, saved_at=saved.saved_at, notes=saved.notes))


@router.delete("/{job_id}", response_model=ApiResponse[None])
async def remove_saved_job(
    job_id: UUID,
    current_user: User = Depends(get_current_user),
    saved_jobs: SavedJobService = Depends(get_saved_job_service),
):
    await saved_jobs.remove_saved_job(current_user.id, job_id)
    return ok(message="Job removed from saved list")
