import structlog

from services.checkout_service.pricing import PromoRule, find_promo_rule
from shared.errors import ValidationFailed

logger = structlog.get_logger(__name__)

MIN_REVIEW_LENGTH = 10

# Star rating -> promo code from the checkout rule table
REWARD_CODES: dict[int, str] = {
    5: "SWEET20",
    4: "SWEET15",
    3: "SWEET10",
    2: "SWEET5",
    1: "SWEET5",
}


class ReviewService:

    @staticmethod
    def reward_for(rating: int, review: str) -> PromoRule:
        if not 1 <= rating <= 5:
            raise ValidationFailed("Your rating helps us improve our bakery.", title="Please rate us!")
        if len(review.strip()) < MIN_REVIEW_LENGTH:
            raise ValidationFailed(
                f"Please write at least {MIN_REVIEW_LENGTH} characters to help other customers.",
                title="Review too short",
            )
        rule = find_promo_rule(REWARD_CODES[rating])
        logger.info("review_reward_issued", rating=rating, code=rule.code)
        return rule
