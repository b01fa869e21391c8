"""
Chart of accounts model.

Every account that journal lines post against lives here:
cash, banks, payables, VAT, revenue, expense. Accounts are
identified to humans by their code.
"""

from datetime import datetime

from sqlalchemy import String, Boolean, DateTime, Integer, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from accounting_core.models.base import Base
from accounting_core.models.enums import AccountType, NormalBalance


DEBIT_NORMAL_TYPES = frozenset({AccountType.ASSET, AccountType.EXPENSE})


class Account(Base):
    """
    A single account in the chart of accounts.

    The normal balance side is derived from the type and never
    stored. An account referenced by journal lines is never
    deleted, only deactivated via is_active=False.
    """

    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(primary_key=True)
    code: Mapped[str] = mapped_column(
        String(20), unique=True, nullable=False, index=True
    )
    name_ar: Mapped[str] = mapped_column(String(150), nullable=False)
    name_en: Mapped[str | None] = mapped_column(String(150), nullable=True)
    account_type: Mapped[AccountType] = mapped_column(
        SAEnum(AccountType, name="account_type_enum"),
        nullable=False,
    )
    sort_order: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    @property
    def normal_balance(self) -> NormalBalance:
        if self.account_type in DEBIT_NORMAL_TYPES:
            return NormalBalance.DEBIT
        return NormalBalance.CREDIT

    def __repr__(self) -> str:
        return f"<Account {self.code} ({self.account_type.value})>"
