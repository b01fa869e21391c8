"""
Shared API dependencies.
"""

from fastapi import Header

from accounting_core.security import AuthContext


def get_auth_context(
    x_accounting_role: str | None = Header(default=None),
    x_user_id: str | None = Header(default=None),
) -> AuthContext:
    """
    Resolve the caller from request headers.

    A missing or unrecognised role yields an AuthContext with
    no role, which every guarded operation rejects.
    """
    return AuthContext.from_values(x_accounting_role, x_user_id)
