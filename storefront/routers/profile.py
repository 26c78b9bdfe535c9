# storefront/routers/profile.py
from fastapi import APIRouter, Depends, HTTPException, status

from storefront.dependencies import Storefront, get_store, require_user
from storefront.schemas.profile import ProfilePageState, ProfileRead, ProfileUpdate
from storefront.schemas.review import ReviewRead

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("/me", response_model=ProfilePageState)
async def read_me(
    store: Storefront = Depends(get_store),
    user_id: str = Depends(require_user),
):
    """
    Profile screen data: username, avatar, member-since and orders.

    The profile row is created on first visit if it does not exist yet.
    `redirect_to` tells the client to leave the page.
    """
    return await store.profiles.load(user_id)


@router.patch("/me", response_model=ProfileRead)
async def update_me(
    payload: ProfileUpdate,
    store: Storefront = Depends(get_store),
    user_id: str = Depends(require_user),
):
    """
    Update username and/or avatar URL.
    """
    profile = await store.profiles.save(user_id, payload)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Profile could not be saved",
        )
    return profile


@router.get("/me/reviews", response_model=list[ReviewRead])
async def list_my_reviews(
    store: Storefront = Depends(get_store),
    user_id: str = Depends(require_user),
):
    return await store.reviews.list_for_user(user_id)
