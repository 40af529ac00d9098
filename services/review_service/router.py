from fastapi import APIRouter, Depends, status

from shared.security.dependencies import verify_public_api_key

from .schemas import ReviewCreate, RewardResponse
from .service import ReviewService

router = APIRouter(prefix="/reviews", tags=["Reviews"], dependencies=[Depends(verify_public_api_key)])


@router.post("", response_model=RewardResponse, status_code=status.HTTP_201_CREATED)
async def submit_review(payload: ReviewCreate):
    rule = ReviewService.reward_for(payload.rating, payload.review)
    return RewardResponse(
        code=rule.code,
        discount_percent=rule.percent,
        title="Thank you for your review!",
        detail=f"You've earned a {rule.percent}% discount code: {rule.code}",
    )
