# storefront/routers/addresses.py
from fastapi import APIRouter, Depends, HTTPException, status

from storefront.dependencies import Storefront, get_store, require_user
from storefront.schemas.address import AddressCreate, AddressRead, AddressUpdate

router = APIRouter(prefix="/addresses", tags=["Addresses"])


async def _owned_address(store: Storefront, user_id: str, address_id: int) -> AddressRead:
    address = await store.addresses.get_by_id(address_id)
    if not address or address.user_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Address not found",
        )
    return address


@router.get("", response_model=list[AddressRead])
async def list_my_addresses(
    store: Storefront = Depends(get_store),
    user_id: str = Depends(require_user),
):
    """Saved addresses, default first."""
    return await store.addresses.list_for_user(user_id)


@router.post("", response_model=AddressRead, status_code=status.HTTP_201_CREATED)
async def create_address(
    payload: AddressCreate,
    store: Storefront = Depends(get_store),
    user_id: str = Depends(require_user),
):
    """
    Save a new address. Marking it default un-defaults the previous one.
    """
    address = await store.addresses.create(user_id, payload)
    if address is None:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Address could not be saved",
        )
    return address


@router.patch("/{address_id}", response_model=AddressRead)
async def update_address(
    address_id: int,
    payload: AddressUpdate,
    store: Storefront = Depends(get_store),
    user_id: str = Depends(require_user),
):
    await _owned_address(store, user_id, address_id)
    address = await store.addresses.update(address_id, payload)
    if address is None:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Address could not be saved",
        )
    return address


@router.delete("/{address_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_address(
    address_id: int,
    store: Storefront = Depends(get_store),
    user_id: str = Depends(require_user),
):
    await _owned_address(store, user_id, address_id)
    if not await store.addresses.delete(address_id):
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Address could not be deleted",
        )
    return None
