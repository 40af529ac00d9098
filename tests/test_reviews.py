import pytest

from services.review_service.service import ReviewService
from shared.errors import ValidationFailed


@pytest.mark.parametrize("rating, code", [(5, "SWEET20"), (4, "SWEET15"), (3, "SWEET10"), (2, "SWEET5"), (1, "SWEET5")])
def test_reward_by_rating(rating, code):
    assert ReviewService.reward_for(rating, "Best croissants in town").code == code


def test_rating_is_required():
    with pytest.raises(ValidationFailed) as exc:
        ReviewService.reward_for(0, "Best croissants in town")
    assert exc.value.title == "Please rate us!"


def test_short_review_is_refused():
    with pytest.raises(ValidationFailed) as exc:
        ReviewService.reward_for(5, "   yum!    ")
    assert exc.value.title == "Review too short"


async def test_review_endpoint(client):
    resp = await client.post("/reviews", json={"rating": 5, "review": "Flaky, buttery, perfect."})
    assert resp.status_code == 201
    body = resp.json()
    assert body["code"] == "SWEET20"
    assert body["detail"] == "You've earned a 20% discount code: SWEET20"

    resp = await client.post("/reviews", json={"rating": 5, "review": "ok"})
    assert resp.status_code == 400
