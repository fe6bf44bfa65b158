from fastapi import APIRouter, Depends

import tavno.api.deps as deps
from tavno.api.errors import http_error
from tavno.api.mappers import review_to_api
from tavno.api.schemas import Review, ReviewIn
from tavno.api.security import get_current_user
from tavno.domain.errors import DomainError
from tavno.domain.models.UserModel import User
from tavno.domain.usecase.reviews import SubmitReview

router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.post("", response_model=Review, status_code=201)
async def submit_review(body: ReviewIn, user: User = Depends(get_current_user)) -> Review:
    """Rate the other party of a completed quest."""
    try:
        usecase = SubmitReview(
            quests_repo=deps.quests_repo,
            reviews_repo=deps.reviews_repo,
            users_repo=deps.users_repo,
            locks=deps.store.locks,
            uow=deps.uow,
        )
        review = await usecase.execute(
            user.user_id,
            quest_id=body.quest_id,
            target_user_id=body.target_user_id,
            rating=body.rating,
            comment=body.comment,
        )
    except DomainError as err:
        raise http_error(err) from err
    return review_to_api(review, user.name)
