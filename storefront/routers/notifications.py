# storefront/routers/notifications.py
from fastapi import APIRouter, Depends

from storefront.core.notifications import Notification
from storefront.dependencies import Storefront, get_store

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=list[Notification])
async def drain_notifications(store: Storefront = Depends(get_store)):
    """
    Pending toasts, oldest first. Each one is returned only once.
    """
    return store.notifier.drain()
