# storefront/repositories/product_repo.py
from storefront.repositories.base import SupabaseRepository
from storefront.schemas.product import ProductRead

# Products carry their category name so guest filtering can use it
PRODUCT_COLUMNS = "*,category:category_id(id,name)"


class ProductRepository(SupabaseRepository):
    """
    Data access layer for products.

    - Pure Supabase queries.
    - No FastAPI, no business logic.
    """

    table = "products"

    async def list_products(self) -> list[ProductRead]:
        rows = await self._fetch_many(
            self.query().select(PRODUCT_COLUMNS),
            "fetching products",
        )
        return [ProductRead.model_validate(r) for r in rows]

    async def get_by_id(self, product_id: str) -> ProductRead | None:
        row = await self._fetch_one(
            self.query()
            .select(PRODUCT_COLUMNS)
            .eq("product_id", product_id)
            .single(),
            f"fetching product with id {product_id}",
        )
        return ProductRead.model_validate(row) if row else None

    async def list_by_category(self, category_id: int) -> list[ProductRead]:
        rows = await self._fetch_many(
            self.query().select(PRODUCT_COLUMNS).eq("category_id", category_id),
            f"fetching products for category {category_id}",
        )
        return [ProductRead.model_validate(r) for r in rows]

    async def search(self, term: str) -> list[ProductRead]:
        """
        Case-insensitive match of `term` against title or description.
        """
        # PostgREST or() syntax uses ',' and '()' as separators
        cleaned = term.replace(",", " ").replace("(", " ").replace(")", " ").strip()
        pattern = f"%{cleaned}%"
        rows = await self._fetch_many(
            self.query()
            .select(PRODUCT_COLUMNS)
            .or_(f"title.ilike.{pattern},description.ilike.{pattern}"),
            f"searching products with query {term}",
        )
        return [ProductRead.model_validate(r) for r in rows]
