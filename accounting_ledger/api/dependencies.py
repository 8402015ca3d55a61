"""
Request-scoped dependencies shared by the routers.
"""

from fastapi import Header

from accounting_ledger.config import get_settings


def get_current_user(x_user: str | None = Header(default=None)) -> str:
    """
    Identify the acting user for audit stamps.

    Authentication sits in front of this service; it forwards the
    authenticated user in the X-User header. Requests without one
    are attributed to the configured DEFAULT_ACTOR.
    """
    if x_user and x_user.strip():
        return x_user.strip()
    return get_settings().DEFAULT_ACTOR
