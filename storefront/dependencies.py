# storefront/dependencies.py
from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request, status
from supabase import AsyncClient

from storefront.core.config import Settings
from storefront.core.notifications import Notifier
from storefront.repositories.address_repo import AddressRepository
from storefront.repositories.category_repo import CategoryRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.profile_repo import ProfileRepository
from storefront.repositories.review_repo import ReviewRepository
from storefront.services.auth_service import AuthService
from storefront.services.cart_service import CartService
from storefront.services.order_service import OrderService
from storefront.services.product_service import ProductService
from storefront.services.profile_service import ProfileService


@dataclass
class Storefront:
    """
    Every piece of shopper state and every service, built once per app.

    Lives on `app.state.store`; routers reach it through the dependencies
    below and never construct their own.
    """

    notifier: Notifier
    cart: CartService
    auth: AuthService
    products: ProductService
    profiles: ProfileService
    orders: OrderService
    addresses: AddressRepository
    reviews: ReviewRepository

    @classmethod
    def build(cls, client: AsyncClient, settings: Settings) -> "Storefront":
        notifier = Notifier(maxlen=settings.NOTIFICATION_BUFFER)
        profile_repo = ProfileRepository(client)
        order_repo = OrderRepository(client)

        cart = CartService(shipping_fee=settings.SHIPPING_FEE)
        auth = AuthService(client, profile_repo, notifier)

        return cls(
            notifier=notifier,
            cart=cart,
            auth=auth,
            products=ProductService(
                ProductRepository(client),
                CategoryRepository(client),
                members_only_categories=settings.MEMBERS_ONLY_CATEGORIES,
            ),
            profiles=ProfileService(auth, profile_repo, order_repo, notifier),
            orders=OrderService(order_repo, cart),
            addresses=AddressRepository(client),
            reviews=ReviewRepository(client),
        )


def get_store(request: Request) -> Storefront:
    return request.app.state.store


def get_cart(store: Storefront = Depends(get_store)) -> CartService:
    return store.cart


def get_auth(store: Storefront = Depends(get_store)) -> AuthService:
    return store.auth


def current_user_id(auth: AuthService = Depends(get_auth)) -> str | None:
    """Signed-in user id, or None for guests."""
    return auth.user_id


def require_user(user_id: str | None = Depends(current_user_id)) -> str:
    """
    Enforce authentication.

    Raises:
        HTTPException(401): if nobody is signed in (or the session expired).
    """
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return user_id
