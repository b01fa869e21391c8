"""
Role-based access control for accounting operations.

Four fixed roles with a static permission matrix that keeps
duties apart: whoever prepares entries is not automatically
the one who approves or cancels them, and auditors can look
but never touch.

Every guarded service method receives an AuthContext and
calls require_permission() before doing anything else. A
caller without a resolvable role is rejected.
"""

import enum
import logging
from dataclasses import dataclass

from accounting_core.exceptions import PermissionDeniedError

logger = logging.getLogger(__name__)


class Role(str, enum.Enum):
    ACCOUNTANT = "ACCOUNTANT"
    APPROVER = "APPROVER"
    AUDITOR = "AUDITOR"
    ADMIN = "ADMIN"


class Permission(str, enum.Enum):
    ACCOUNT_VIEW = "ACCOUNT_VIEW"
    ACCOUNT_EDIT = "ACCOUNT_EDIT"
    JOURNAL_CREATE = "JOURNAL_CREATE"
    JOURNAL_APPROVE = "JOURNAL_APPROVE"
    JOURNAL_CANCEL = "JOURNAL_CANCEL"
    DOCUMENT_CREATE = "DOCUMENT_CREATE"
    PERIOD_LOCK = "PERIOD_LOCK"
    REPORT_VIEW = "REPORT_VIEW"
    AUDIT_VIEW = "AUDIT_VIEW"


ROLE_PERMISSIONS: dict[Role, frozenset[Permission]] = {
    Role.ACCOUNTANT: frozenset({
        Permission.ACCOUNT_VIEW,
        Permission.JOURNAL_CREATE,
        Permission.DOCUMENT_CREATE,
        Permission.REPORT_VIEW,
    }),
    Role.APPROVER: frozenset({
        Permission.ACCOUNT_VIEW,
        Permission.JOURNAL_CREATE,
        Permission.JOURNAL_APPROVE,
        Permission.JOURNAL_CANCEL,
        Permission.DOCUMENT_CREATE,
        Permission.REPORT_VIEW,
    }),
    Role.AUDITOR: frozenset({
        Permission.ACCOUNT_VIEW,
        Permission.REPORT_VIEW,
        Permission.AUDIT_VIEW,
    }),
    Role.ADMIN: frozenset(Permission),
}


@dataclass(frozen=True)
class AuthContext:
    """The caller of an operation, as resolved by the identity provider."""

    role: Role | None
    user_id: str | None = None

    @classmethod
    def from_values(cls, role: str | None, user_id: str | None = None):
        """
        Build a context from raw strings.

        An unknown role string resolves to no role at all rather
        than to some default.
        """
        try:
            resolved = Role(role) if role else None
        except ValueError:
            resolved = None
        return cls(role=resolved, user_id=user_id or None)


def has_permission(role: Role | None, permission: Permission) -> bool:
    if role is None:
        return False
    return permission in ROLE_PERMISSIONS.get(role, frozenset())


def require_permission(actor: AuthContext | None, permission: Permission) -> None:
    """Raise PermissionDeniedError unless the actor holds the permission."""
    role = actor.role if actor is not None else None
    if not has_permission(role, permission):
        logger.warning(
            "Permission %s denied for role=%s user=%s",
            permission.value,
            role.value if role else None,
            actor.user_id if actor is not None else None,
        )
        raise PermissionDeniedError(
            permission.value, role.value if role else None
        )
