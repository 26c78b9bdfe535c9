# storefront/repositories/address_repo.py
from storefront.repositories.base import SupabaseRepository
from storefront.core.errors import RemoteError, log_error
from storefront.schemas.address import AddressCreate, AddressRead, AddressUpdate


class AddressRepository(SupabaseRepository):
    """
    Data access layer for shipping addresses.

    A user has at most one default address: saving an address as default
    first clears the flag on the others.
    """

    table = "addresses"

    async def list_for_user(self, user_id: str) -> list[AddressRead]:
        """Default address first."""
        rows = await self._fetch_many(
            self.query()
            .select("*")
            .eq("user_id", user_id)
            .order("is_default", desc=True),
            f"fetching addresses for user {user_id}",
        )
        return [AddressRead.model_validate(r) for r in rows]

    async def get_by_id(self, address_id: int) -> AddressRead | None:
        row = await self._fetch_one(
            self.query().select("*").eq("id", address_id).single(),
            f"fetching address with id {address_id}",
        )
        return AddressRead.model_validate(row) if row else None

    async def create(self, user_id: str, address: AddressCreate) -> AddressRead | None:
        if address.is_default:
            await self.clear_default(user_id)

        rows = await self._fetch_many(
            self.query().insert({**address.model_dump(), "user_id": user_id}),
            "creating address",
        )
        return AddressRead.model_validate(rows[0]) if rows else None

    async def update(
        self,
        address_id: int,
        address: AddressUpdate,
    ) -> AddressRead | None:
        if address.is_default:
            current = await self.get_by_id(address_id)
            if current:
                await self.clear_default(current.user_id)

        rows = await self._fetch_many(
            self.query()
            .update(address.model_dump(exclude_unset=True))
            .eq("id", address_id),
            f"updating address with id {address_id}",
        )
        return AddressRead.model_validate(rows[0]) if rows else None

    async def delete(self, address_id: int) -> bool:
        try:
            await self._execute(self.query().delete().eq("id", address_id))
        except RemoteError as e:
            log_error(f"deleting address with id {address_id}", e)
            return False
        return True

    async def clear_default(self, user_id: str) -> None:
        await self._fetch_many(
            self.query()
            .update({"is_default": False})
            .eq("user_id", user_id)
            .eq("is_default", True),
            f"clearing default address for user {user_id}",
        )
