# storefront/repositories/review_repo.py
from datetime import datetime, timezone

from storefront.core.errors import RemoteError, log_error
from storefront.repositories.base import SupabaseRepository
from storefront.schemas.review import ReviewCreate, ReviewRead


class ReviewRepository(SupabaseRepository):
    """
    Data access layer for product reviews.

    One review per (user_id, product_id): creating a second one updates
    the first. The rule lives here, not in a table constraint.
    """

    table = "reviews"

    async def list_for_product(self, product_id: str) -> list[ReviewRead]:
        rows = await self._fetch_many(
            self.query()
            .select("*,profile:user_id(username,avatar_url)")
            .eq("product_id", product_id)
            .order("created_at", desc=True),
            f"fetching reviews for product {product_id}",
        )
        return [ReviewRead.model_validate(r) for r in rows]

    async def list_for_user(self, user_id: str) -> list[ReviewRead]:
        rows = await self._fetch_many(
            self.query()
            .select("*,product:product_id(product_id,title,image)")
            .eq("user_id", user_id)
            .order("created_at", desc=True),
            f"fetching reviews for user {user_id}",
        )
        return [ReviewRead.model_validate(r) for r in rows]

    async def get_by_id(self, review_id: int) -> ReviewRead | None:
        row = await self._fetch_one(
            self.query().select("*").eq("id", review_id).single(),
            f"fetching review with id {review_id}",
        )
        return ReviewRead.model_validate(row) if row else None

    async def find_existing(self, user_id: str, product_id: str) -> int | None:
        """Id of the user's review for this product, if any."""
        rows = await self._fetch_many(
            self.query()
            .select("id")
            .eq("user_id", user_id)
            .eq("product_id", product_id)
            .limit(1),
            "checking for an existing review",
        )
        return rows[0]["id"] if rows else None

    async def create_review(
        self,
        user_id: str,
        review: ReviewCreate,
    ) -> ReviewRead | None:
        existing_id = await self.find_existing(user_id, review.product_id)
        if existing_id is not None:
            return await self.update_review(
                existing_id,
                rating=review.rating,
                comment=review.comment,
            )

        rows = await self._fetch_many(
            self.query().insert(
                {
                    **review.model_dump(),
                    "user_id": user_id,
                    "created_at": datetime.now(timezone.utc).isoformat(),
                }
            ),
            "creating review",
        )
        return ReviewRead.model_validate(rows[0]) if rows else None

    async def update_review(
        self,
        review_id: int,
        *,
        rating: int,
        comment: str | None,
    ) -> ReviewRead | None:
        rows = await self._fetch_many(
            self.query()
            .update({"rating": rating, "comment": comment})
            .eq("id", review_id),
            f"updating review with id {review_id}",
        )
        return ReviewRead.model_validate(rows[0]) if rows else None

    async def delete_review(self, review_id: int) -> bool:
        try:
            await self._execute(self.query().delete().eq("id", review_id))
        except RemoteError as e:
            log_error(f"deleting review with id {review_id}", e)
            return False
        return True
