# storefront/core/errors.py
"""
Error taxonomy for Supabase (PostgREST) failures.

Two error codes carry meaning for the application:
  - PGRST116: the query expected one row and found none
  - 42501:    a row-level-security policy rejected the statement

Both are read by the profile flow as "the profile may not exist yet".
"""

import logging
from typing import Any

from supabase import PostgrestAPIError

from storefront.core.notifications import Notifier

logger = logging.getLogger(__name__)

NO_ROWS_RETURNED = "PGRST116"
RLS_VIOLATION = "42501"


class RemoteError(Exception):
    """
    Structured error raised by data-access operations that propagate
    failures instead of returning an empty result.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: Any = None,
        hint: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details
        self.hint = hint

    @classmethod
    def from_api_error(cls, error: PostgrestAPIError) -> "RemoteError":
        return cls(
            message=error.message or "Database error",
            code=error.code,
            details=error.details,
            hint=error.hint,
        )

    @property
    def is_no_rows(self) -> bool:
        return self.code == NO_ROWS_RETURNED

    @property
    def is_rls_violation(self) -> bool:
        return self.code == RLS_VIOLATION

    @property
    def is_profile_access_error(self) -> bool:
        """Profile row missing, or hidden from us by RLS."""
        return self.is_no_rows or self.is_rls_violation

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "hint": self.hint,
        }

    def __repr__(self) -> str:
        return f"RemoteError(code={self.code!r}, message={self.message!r})"


def log_error(context: str, error: Any) -> None:
    """Log an error with context but don't display it to the user."""
    logger.error("Error in %s: %r", context, error)


def handle_common_errors(
    error: Any,
    notifier: Notifier | None = None,
    *,
    context: str = "operation",
    show_toast: bool = True,
    silent_on_no_rows: bool = True,
) -> bool:
    """
    Log an error and, unless disabled, surface a toast for it.

    Rules:
      - no rows       -> silent by default; otherwise warn + "No data found."
      - RLS violation -> error log + permission toast
      - other remote  -> error log + "Database error: <message>"
      - anything else -> error log + its message

    Returns:
        True if an error was handled, False when `error` is falsy.
    """
    if not error:
        return False

    toast = notifier.error if (notifier is not None and show_toast) else None

    if isinstance(error, PostgrestAPIError):
        error = RemoteError.from_api_error(error)

    if isinstance(error, RemoteError):
        if error.is_no_rows:
            if not silent_on_no_rows:
                logger.warning("No rows returned for %s", context)
                if toast:
                    toast("No data found.")
            return True

        if error.is_rls_violation:
            logger.error("RLS violation in %s: %r", context, error)
            if toast:
                toast("Permission denied to access this data.")
            return True

        logger.error("Database error in %s: %r", context, error)
        if toast:
            toast(f"Database error: {error.message}")
        return True

    if isinstance(error, Exception):
        logger.error("Error in %s: %r", context, error)
        if toast:
            toast(str(error) or "An error occurred")
        return True

    logger.error("Unknown error in %s: %r", context, error)
    if toast:
        toast("An unexpected error occurred")
    return True
