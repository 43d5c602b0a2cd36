"""
Review Endpoints
/api/v1/reviews/* routes
"""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from core.config import settings
from domain.entities import User
from domain.enums import UserType
from application.services.pagination import PageRequest
from application.services.reviews import RatingAggregationService, ReviewService
from presentation.api.v1.container import get_rating_aggregation, get_review_service
from presentation.api.v1.dependencies import get_current_user, limiter, require_role
from presentation.api.v1.schemas.common import ApiResponse, ok, paginated
from presentation.api.v1.schemas.review import (
    RatingStatsResponse,
    ReviewCreateRequest,
    ReviewLikeResponse,
    ReviewModerationRequest,
    ReviewReportRequest,
    ReviewResponse,
    ReviewUpdateRequest,
)


router = APIRouter()


@router.get("/company/{company_id}", response_model=ApiResponse[List[ReviewResponse]])
async def company_reviews(
    company_id: UUID,
    rating: Optional[int] = Query(None, ge=1, le=5),
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    reviews: ReviewService = Depends(get_review_service),
):
    result = await reviews.list_company_reviews(company_id, rating, PageRequest.of(page, limit))
    return paginated(result, ReviewResponse.model_validate)


@router.get("/company/{company_id}/stats", response_model=ApiResponse[RatingStatsResponse])
async def company_rating_stats(
    company_id: UUID,
    ratings: RatingAggregationService = Depends(get_rating_aggregation),
):
    return ok(RatingStatsResponse.from_summary(await ratings.rating_stats(company_id)))


@router.get("/my-reviews", response_model=ApiResponse[List[ReviewResponse]])
async def my_reviews(
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    reviews: ReviewService = Depends(get_review_service),
):
    result = await reviews.list_user_reviews(current_user.id, PageRequest.of(page, limit))
    return paginated(result, ReviewResponse.model_validate)


@router.get("/flagged", response_model=ApiResponse[List[ReviewResponse]])
async def flagged_reviews(
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    current_user: User = Depends(require_role(UserType.ADMIN)),
    reviews: ReviewService = Depends(get_review_service),
):
    result = await reviews.list_flagged_reviews(current_user, PageRequest.of(page, limit))
    return paginated(result, ReviewResponse.model_validate)


@router.post("", response_model=ApiResponse[ReviewResponse], status_code=status.HTTP_201_CREATED)
@limiter.limit(
    settings.RATE_LIMIT_REVIEWS,
    error_message="You have reached the maximum number of reviews per day.",
)
async def create_review(
    request: Request,
    body: ReviewCreateRequest,
    current_user: User = Depends(get_current_user),
    reviews: ReviewService = Depends(get_review_service),
):
    review = await reviews.create_review(current_user, body.model_dump())
    return ok(ReviewResponse.model_validate(review), "Review created successfully")


@router.get("/{review_id}", response_model=ApiResponse[ReviewResponse])
async def get_review(
    review_id: UUID,
    reviews: ReviewService = Depends(get_review_service),
):
    return ok(ReviewResponse.model_validate(await reviews.get_review(review_id)))


@router.put("/{review_id}", response_model=ApiResponse[ReviewResponse])
async def update_review(
    review_id: UUID,
    body: ReviewUpdateRequest,
    current_user: User = Depends(get_current_user),
    reviews: ReviewService = Depends(get_review_service),
):
    review = await reviews.update_review(review_id, current_user.id, body.model_dump(exclude_unset=True))
    return ok(ReviewResponse.model_validate(review), "Review updated successfully")


@router.delete("/{review_id}", response_model=ApiResponse[None])
async def delete_review(
    review_id: UUID,
    current_user: User = Depends(get_current_user),
    reviews: ReviewService = Depends(get_review_service),
):
    await reviews.delete_review(review_id, current_user.id)
    return ok(message="Review deleted successfully")


@router.post("/{review_id}/like", response_model=ApiResponse[ReviewLikeResponse])
async def like_review(
    review_id: UUID,
    current_user: User = Depends(get_current_user),
    reviews: ReviewService = Depends(get_review_service),
):
    liked, likes = await reviews.like_review(review_id, current_user.id)
    message = "Review liked successfully" if liked else "Review unliked successfully"
    return ok(ReviewLikeResponse(liked=liked, likes_count=likes), message)


@router.post("/{review_id}/report", response_model=ApiResponse[None])
async def report_review(
    review_id: UUID,
    body: ReviewReportRequest,
    current_user: User = Depends(get_current_user),
    reviews: ReviewService = Depends(get_review_service),
):
    await reviews.report_review(review_id, current_user.id, body.reason, body.description)
    return ok(message="Review reported successfully. Our team will review it shortly.")


@router.put("/{review_id}/moderate", response_model=ApiResponse[ReviewResponse])
async def moderate_review(
    review_id: UUID,
    body: ReviewModerationRequest,
    current_user: User = Depends(require_role(UserType.ADMIN)),
    reviews: ReviewService = Depends(get_review_service),
):
    review = await reviews.moderate_review(review_id, current_user, body.approve)
    message = "Review approved" if body.approve else "Review hidden"
    return ok(ReviewResponse.model_validate(review), message)
