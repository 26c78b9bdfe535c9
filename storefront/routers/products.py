# storefront/routers/products.py
from fastapi import APIRouter, Depends

from storefront.dependencies import Storefront, current_user_id, get_store
from storefront.schemas.product import ProductRead
from storefront.schemas.review import ReviewRead

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("", response_model=list[ProductRead])
async def list_products(
    search: str | None = None,
    category_id: int | None = None,
    store: Storefront = Depends(get_store),
    user_id: str | None = Depends(current_user_id),
):
    """
    List products.

    - Public endpoint.
    - `search` matches title or description, case-insensitive.
    - Guests don't see members-only categories.
    """
    return await store.products.list_products(
        signed_in=user_id is not None,
        search=search,
        category_id=category_id,
    )


@router.get("/{product_id}", response_model=ProductRead)
async def get_product(
    product_id: str,
    store: Storefront = Depends(get_store),
    user_id: str | None = Depends(current_user_id),
):
    """
    Get a single product by id.

    - Public endpoint.
    """
    return await store.products.get_product(product_id, signed_in=user_id is not None)


@router.get("/{product_id}/reviews", response_model=list[ReviewRead])
async def list_product_reviews(
    product_id: str,
    store: Storefront = Depends(get_store),
):
    """
    Reviews for a product, newest first, with reviewer name/avatar.
    """
    return await store.reviews.list_for_product(product_id)
