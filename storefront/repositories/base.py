# storefront/repositories/base.py
import logging
from typing import Any

from supabase import AsyncClient, PostgrestAPIError

from storefront.core.errors import RemoteError, log_error

logger = logging.getLogger(__name__)


class SupabaseRepository:
    """
    Shared plumbing for table repositories.

    Two ways to run a query:
      - `_fetch_*`: log remote errors and return [] / None, so list and
        detail screens keep rendering through transient backend issues
      - `_execute`: raise RemoteError, for flows that must branch on the
        failure (profile, order creation)
    """

    table: str = ""

    def __init__(self, client: AsyncClient):
        self.client = client

    def query(self):
        return self.client.table(self.table)

    async def _execute(self, query) -> Any:
        try:
            response = await query.execute()
        except PostgrestAPIError as e:
            raise RemoteError.from_api_error(e) from e
        return response.data

    async def _fetch_many(self, query, context: str) -> list[dict[str, Any]]:
        try:
            data = await self._execute(query)
        except RemoteError as e:
            log_error(context, e)
            return []
        return data or []

    async def _fetch_one(self, query, context: str) -> dict[str, Any] | None:
        try:
            data = await self._execute(query)
        except RemoteError as e:
            log_error(context, e)
            return None
        return data or None
