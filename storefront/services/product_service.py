# storefront/services/product_service.py
from fastapi import HTTPException, status

from storefront.repositories.category_repo import CategoryRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.category import CategoryRead
from storefront.schemas.product import ProductRead


class ProductService:
    """
    Business logic for product browsing.

    Responsibilities:
      - search by title/description
      - hide members-only categories from guests
      - map missing products/categories to 404
    """

    def __init__(
        self,
        repo: ProductRepository,
        category_repo: CategoryRepository,
        members_only_categories: list[str] | None = None,
    ):
        self.repo = repo
        self.category_repo = category_repo
        self.members_only = {c.strip().lower() for c in members_only_categories or []}

    # ----- Helpers -----

    def _visible_to(self, product: ProductRead, signed_in: bool) -> bool:
        if signed_in or product.category is None:
            return True
        return product.category.name.strip().lower() not in self.members_only

    # ----- Products -----

    async def list_products(
        self,
        signed_in: bool,
        search: str | None = None,
        category_id: int | None = None,
    ) -> list[ProductRead]:
        """
        List products for the storefront grid.

        - `search` filters on title/description (case-insensitive).
        - `category_id` restricts to one category.
        - Guests never see members-only categories.
        """
        term = (search or "").strip()
        if term:
            products = await self.repo.search(term)
        elif category_id is not None:
            products = await self.repo.list_by_category(category_id)
        else:
            products = await self.repo.list_products()

        if term and category_id is not None:
            products = [p for p in products if p.category_id == category_id]

        return [p for p in products if self._visible_to(p, signed_in)]

    async def get_product(self, product_id: str, signed_in: bool) -> ProductRead:
        product = await self.repo.get_by_id(product_id)
        if not product or not self._visible_to(product, signed_in):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    # ----- Categories -----

    async def list_categories(self) -> list[CategoryRead]:
        return await self.category_repo.list_categories()

    async def get_category(self, category_id: int) -> CategoryRead:
        category = await self.category_repo.get_by_id(category_id)
        if not category:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Category not found",
            )
        return category

    async def list_subcategories(self, parent_id: int) -> list[CategoryRead]:
        return await self.category_repo.list_subcategories(parent_id)
