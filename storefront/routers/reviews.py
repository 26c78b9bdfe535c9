# storefront/routers/reviews.py
from fastapi import APIRouter, Depends, HTTPException, status

from storefront.dependencies import Storefront, get_store, require_user
from storefront.schemas.review import ReviewCreate, ReviewRead

router = APIRouter(prefix="/reviews", tags=["Reviews"])


async def _owned_review(store: Storefront, user_id: str, review_id: int) -> ReviewRead:
    review = await store.reviews.get_by_id(review_id)
    if not review or review.user_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Review not found",
        )
    return review


@router.post("", response_model=ReviewRead)
async def create_review(
    payload: ReviewCreate,
    store: Storefront = Depends(get_store),
    user_id: str = Depends(require_user),
):
    """
    Review a product. Reviewing the same product again replaces the
    earlier rating/comment.
    """
    review = await store.reviews.create_review(user_id, payload)
    if review is None:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Review could not be saved",
        )
    return review


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_review(
    review_id: int,
    store: Storefront = Depends(get_store),
    user_id: str = Depends(require_user),
):
    """
    Delete one of your reviews.

    - 404 if the review does not exist or belongs to someone else
    """
    await _owned_review(store, user_id, review_id)
    if not await store.reviews.delete_review(review_id):
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Review could not be deleted",
        )
    return None
