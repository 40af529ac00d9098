from decimal import Decimal

from pydantic import BaseModel


class ReviewCreate(BaseModel):
    rating: int = 0
    review: str = ""


class RewardResponse(BaseModel):
    code: str
    discount_percent: Decimal
    title: str
    detail: str
