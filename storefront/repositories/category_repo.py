# storefront/repositories/category_repo.py
from storefront.repositories.base import SupabaseRepository
from storefront.schemas.category import CategoryRead


class CategoryRepository(SupabaseRepository):
    table = "categories"

    async def list_categories(self) -> list[CategoryRead]:
        rows = await self._fetch_many(
            self.query().select("*").order("name"),
            "fetching categories",
        )
        return [CategoryRead.model_validate(r) for r in rows]

    async def get_by_id(self, category_id: int) -> CategoryRead | None:
        row = await self._fetch_one(
            self.query().select("*").eq("id", category_id).single(),
            f"fetching category with id {category_id}",
        )
        return CategoryRead.model_validate(row) if row else None

    async def list_subcategories(self, parent_id: int) -> list[CategoryRead]:
        rows = await self._fetch_many(
            self.query().select("*").eq("parent_id", parent_id).order("name"),
            f"fetching subcategories for parent id {parent_id}",
        )
        return [CategoryRead.model_validate(r) for r in rows]
