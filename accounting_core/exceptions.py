"""
Accounting error taxonomy.

Every rejection raised by a service is an AccountingError
subclass. Each carries the HTTP status the API layer should
answer with, plus enough context for a user-facing message.
"""

from datetime import date
from decimal import Decimal


class AccountingError(Exception):
    """Base class for all accounting rejections."""

    status_code: int = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class ValidationError(AccountingError):
    """Malformed document or entry input, or an invalid state change."""

    status_code = 400


class ImbalancedEntryError(AccountingError):
    """Total debits do not equal total credits."""

    status_code = 400

    def __init__(self, total_debit: Decimal, total_credit: Decimal):
        self.total_debit = total_debit
        self.total_credit = total_credit
        super().__init__(
            f"Entry does not balance: "
            f"debits={total_debit}, credits={total_credit}"
        )


class ConfigurationError(AccountingError):
    """
    A well-known account required by an operation is missing.

    Raised before anything is written, so the operation
    leaves no partial state behind.
    """

    status_code = 409

    def __init__(self, account_code: str, purpose: str = ""):
        self.account_code = account_code
        self.purpose = purpose
        detail = f" ({purpose})" if purpose else ""
        super().__init__(
            f"Chart of accounts is incomplete: "
            f"account {account_code}{detail} is missing"
        )


class PeriodLockedError(AccountingError):
    """The target date falls inside a locked fiscal period."""

    status_code = 409

    def __init__(self, target_date: date, period_code: str):
        self.target_date = target_date
        self.period_code = period_code
        super().__init__(
            f"Fiscal period {period_code} is locked; "
            f"cannot post on {target_date.isoformat()}"
        )


class PermissionDeniedError(AccountingError):
    status_code = 403

    def __init__(self, permission: str, role: str | None = None):
        self.permission = permission
        self.role = role
        super().__init__(f"Permission denied: {permission} required")


class NotFoundError(AccountingError):
    status_code = 404

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class SerialConflictError(AccountingError):
    """Another writer took the serial number first; the request may be retried."""

    status_code = 409

    def __init__(self, serial_number: str):
        self.serial_number = serial_number
        super().__init__(
            f"Serial number {serial_number} is already in use; retry the request"
        )
