# storefront/routers/categories.py
from fastapi import APIRouter, Depends

from storefront.dependencies import Storefront, get_store
from storefront.schemas.category import CategoryRead

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=list[CategoryRead])
async def list_categories(store: Storefront = Depends(get_store)):
    """All categories, ordered by name."""
    return await store.products.list_categories()


@router.get("/{category_id}", response_model=CategoryRead)
async def get_category(category_id: int, store: Storefront = Depends(get_store)):
    return await store.products.get_category(category_id)


@router.get("/{category_id}/children", response_model=list[CategoryRead])
async def list_subcategories(category_id: int, store: Storefront = Depends(get_store)):
    return await store.products.list_subcategories(category_id)
