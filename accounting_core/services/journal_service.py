"""
Journal service: the core of the ledger.

This service enforces the fundamental rules:
1. Every entry must balance (debits = credits)
2. Entries are never edited in place; they are cancelled,
   approved, or superseded by a reversal
3. Accounts must exist and be active
4. Nothing dated inside a locked fiscal period may change

No other service writes journal entries directly. Document
posting builds its entry here too.
"""

import logging
import uuid
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from accounting_core.config import Settings, get_settings
from accounting_core.exceptions import (
    ImbalancedEntryError,
    NotFoundError,
    SerialConflictError,
    ValidationError,
)
from accounting_core.models.enums import AuditAction, AuditEntityType, EntryStatus
from accounting_core.models.journal_entry import JournalEntry, JournalLine
from accounting_core.models.ledger_account import Account
from accounting_core.schemas.ledger import JournalEntryCreate, JournalLineCreate
from accounting_core.security import AuthContext, Permission, require_permission
from accounting_core.services.audit_service import AuditService
from accounting_core.services.period_service import FiscalPeriodService

logger = logging.getLogger(__name__)

AMOUNT_QUANTUM = Decimal("0.0001")
ZERO = Decimal("0")


def to_amount(value) -> Decimal:
    """Normalize a monetary value to the ledger's 4-decimal precision."""
    return Decimal(value if value is not None else 0).quantize(
        AMOUNT_QUANTUM, rounding=ROUND_HALF_UP
    )


def next_serial(db: Session, column, prefix: str, *criteria) -> str:
    """
    Next serial after the highest numeric suffix under prefix.

    Serials whose suffix is not a number are ignored.
    """
    serials = db.execute(
        select(column).where(column.like(f"{prefix}%"), *criteria)
    ).scalars()
    highest = 0
    for serial in serials:
        suffix = serial[len(prefix):]
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return f"{prefix}{highest + 1:04d}"


def _entry_state(entry: JournalEntry) -> dict:
    return {
        "serial_number": entry.serial_number,
        "date": entry.date.isoformat(),
        "status": entry.status.value,
        "total_debit": str(entry.total_debit),
        "total_credit": str(entry.total_credit),
        "replaced_by": str(entry.replaced_by) if entry.replaced_by else None,
    }


class JournalService:
    """
    All journal operations pass through this service.

    The service takes a database session as a constructor
    argument. The caller controls the transaction boundary:
    they decide when to commit or rollback.
    """

    def __init__(self, db: Session, settings: Settings | None = None):
        self.db = db
        self.settings = settings or get_settings()
        self.periods = FiscalPeriodService(db)
        self.audit = AuditService(db)

    # --- Building and validating ---

    def _validate_lines(self, lines: list[JournalLineCreate]) -> None:
        if not lines:
            raise ValidationError("A journal entry needs at least one line")

        for position, line in enumerate(lines, start=1):
            if line.debit < 0 or line.credit < 0:
                raise ValidationError(
                    f"Line {position}: amounts must not be negative"
                )
            if line.debit > 0 and line.credit > 0:
                raise ValidationError(
                    f"Line {position}: a line is either a debit or a credit"
                )
            if line.debit == 0 and line.credit == 0:
                raise ValidationError(
                    f"Line {position}: a line must carry a debit or a credit"
                )

    def _validate_accounts(
        self, account_ids: set[int], allow_inactive: bool = False
    ) -> None:
        accounts = self.db.execute(
            select(Account).where(Account.id.in_(account_ids))
        ).scalars().all()
        accounts_by_id = {a.id: a for a in accounts}

        missing = account_ids - set(accounts_by_id.keys())
        if missing:
            raise ValidationError(f"Accounts not found: {sorted(missing)}")

        if not allow_inactive:
            for account in accounts_by_id.values():
                if not account.is_active:
                    raise ValidationError(f"Account {account.code} is not active")

    def _next_serial(self, entry_date: date) -> str:
        return next_serial(
            self.db, JournalEntry.serial_number, f"JRN-{entry_date.year}-"
        )

    def build_entry(
        self, request: JournalEntryCreate, allow_inactive: bool = False
    ) -> JournalEntry:
        """
        Validate a request and return an entry that is not yet in the session.

        Checks run in this order: line shape, accounts, fiscal
        period lock, balance. If any check fails nothing has been
        added to the session. The serial number is assigned later,
        by record_entry.
        """
        self._validate_lines(request.lines)
        self._validate_accounts(
            {line.account_id for line in request.lines}, allow_inactive
        )
        self.periods.ensure_open(request.date)

        total_debit = sum((to_amount(l.debit) for l in request.lines), ZERO)
        total_credit = sum((to_amount(l.credit) for l in request.lines), ZERO)
        if total_debit != total_credit:
            logger.warning(
                "Rejected imbalanced entry dated %s: debits=%s credits=%s",
                request.date, total_debit, total_credit,
            )
            raise ImbalancedEntryError(total_debit, total_credit)

        entry = JournalEntry(
            id=uuid.uuid4(),
            date=request.date,
            status=request.status,
            total_debit=total_debit,
            total_credit=total_credit,
            description_ar=request.description_ar,
            description_en=request.description_en,
            document_type=request.document_type,
            document_id=request.document_id,
            contact_id=request.contact_id,
            bank_account_id=request.bank_account_id,
            property_id=request.property_id,
            project_id=request.project_id,
        )
        entry.lines = [
            JournalLine(
                position=position,
                account_id=line.account_id,
                debit=to_amount(line.debit),
                credit=to_amount(line.credit),
                description_ar=line.description_ar,
                description_en=line.description_en,
            )
            for position, line in enumerate(request.lines)
        ]
        return entry

    def record_entry(
        self, entry: JournalEntry, actor: AuthContext, reason: str | None = None
    ) -> JournalEntry:
        """
        Add a built entry to the session and flush it with its lines.

        Anything else already pending in the session (a document
        being posted, say) goes out in the same flush. The serial
        is numbered here, immediately before the flush, so entries
        committed by other sessions since build_entry are counted.
        A serial taken by a concurrent writer in the meantime raises
        SerialConflictError; the caller rolls back and may retry.
        """
        entry.serial_number = self._next_serial(entry.date)
        self.db.add(entry)
        try:
            self.db.flush()
        except IntegrityError as e:
            logger.warning(
                "Serial %s was taken concurrently: %s", entry.serial_number, e.orig
            )
            raise SerialConflictError(entry.serial_number) from e

        self.audit.append(
            AuditAction.CREATE,
            AuditEntityType.JOURNAL_ENTRY,
            entry.id,
            user_id=actor.user_id,
            reason=reason,
            new_state=_entry_state(entry),
        )
        logger.info(
            "Posted journal entry %s dated %s for %s",
            entry.serial_number, entry.date, entry.total_debit,
        )
        return entry

    # --- Operations ---

    def create_entry(
        self, request: JournalEntryCreate, actor: AuthContext
    ) -> JournalEntry:
        """Create a balanced journal entry, APPROVED unless DRAFT was asked for."""
        require_permission(actor, Permission.JOURNAL_CREATE)
        entry = self.build_entry(request)
        return self.record_entry(entry, actor)

    def get_entry(self, entry_id) -> JournalEntry:
        entry = self.db.get(JournalEntry, entry_id)
        if entry is None:
            raise NotFoundError("Journal entry", entry_id)
        return entry

    def cancel_entry(
        self, entry_id, actor: AuthContext, reason: str | None = None
    ) -> JournalEntry:
        """
        Cancel an entry, removing it from every balance.

        Cancelling twice is rejected rather than silently repeated.
        """
        require_permission(actor, Permission.JOURNAL_CANCEL)
        entry = self.get_entry(entry_id)

        if entry.status == EntryStatus.CANCELLED:
            raise ValidationError(
                f"Journal entry {entry.serial_number} is already cancelled"
            )
        if entry.replaced_by is not None:
            raise ValidationError(
                f"Journal entry {entry.serial_number} has been reversed "
                f"and cannot be cancelled"
            )
        self.periods.ensure_open(entry.date)

        previous = _entry_state(entry)
        entry.status = EntryStatus.CANCELLED
        self.db.flush()

        self.audit.append(
            AuditAction.CANCEL,
            AuditEntityType.JOURNAL_ENTRY,
            entry.id,
            user_id=actor.user_id,
            reason=reason,
            previous_state=previous,
            new_state=_entry_state(entry),
        )
        logger.info("Cancelled journal entry %s", entry.serial_number)
        return entry

    def approve_entry(self, entry_id, actor: AuthContext) -> JournalEntry:
        """Move a DRAFT entry to APPROVED."""
        require_permission(actor, Permission.JOURNAL_APPROVE)
        entry = self.get_entry(entry_id)

        if entry.status != EntryStatus.DRAFT:
            raise ValidationError(
                f"Only DRAFT entries can be approved "
                f"(status: {entry.status.value})"
            )
        self.periods.ensure_open(entry.date)

        previous = _entry_state(entry)
        entry.status = EntryStatus.APPROVED
        self.db.flush()

        self.audit.append(
            AuditAction.UPDATE,
            AuditEntityType.JOURNAL_ENTRY,
            entry.id,
            user_id=actor.user_id,
            reason="Approved",
            previous_state=previous,
            new_state=_entry_state(entry),
        )
        logger.info("Approved journal entry %s", entry.serial_number)
        return entry

    def reverse_entry(
        self,
        entry_id,
        actor: AuthContext,
        reverse_date: date | None = None,
    ) -> JournalEntry:
        """
        Reverse an entry by posting its mirror image.

        Every line's debit and credit are swapped into a new
        entry dated reverse_date (today by default), and the
        original is marked replaced_by the new one. The original
        may sit in a locked period; the reversal may not.
        """
        require_permission(actor, Permission.JOURNAL_CANCEL)
        original = self.get_entry(entry_id)

        if original.status == EntryStatus.CANCELLED:
            raise ValidationError(
                f"Journal entry {original.serial_number} is cancelled "
                f"and cannot be reversed"
            )
        if original.replaced_by is not None:
            raise ValidationError(
                f"Journal entry {original.serial_number} was already reversed"
            )

        reverse_date = reverse_date or date.today()
        request = JournalEntryCreate(
            date=reverse_date,
            status=EntryStatus.APPROVED,
            description_ar=f"قيد معكوس لـ {original.serial_number}",
            description_en=f"Reversal of {original.serial_number}",
            contact_id=original.contact_id,
            bank_account_id=original.bank_account_id,
            property_id=original.property_id,
            project_id=original.project_id,
            lines=[
                JournalLineCreate(
                    account_id=line.account_id,
                    debit=line.credit,
                    credit=line.debit,
                    description_ar=line.description_ar,
                    description_en=line.description_en,
                )
                for line in original.lines
            ],
        )
        # Accounts deactivated since the original posting may still be reversed
        reversal = self.build_entry(request, allow_inactive=True)
        self.record_entry(
            reversal, actor, reason=f"Reversal of {original.serial_number}"
        )

        previous = _entry_state(original)
        original.replaced_by = reversal.id
        self.db.flush()

        self.audit.append(
            AuditAction.REVERSE,
            AuditEntityType.JOURNAL_ENTRY,
            original.id,
            user_id=actor.user_id,
            reason=f"Reversed by {reversal.serial_number}",
            previous_state=previous,
            new_state=_entry_state(original),
        )
        logger.info(
            "Reversed journal entry %s with %s",
            original.serial_number, reversal.serial_number,
        )
        return reversal

    # --- Queries ---

    def _range_query(self, from_date: date | None, to_date: date | None):
        stmt = select(JournalEntry).options(selectinload(JournalEntry.lines))
        if from_date is not None:
            stmt = stmt.where(JournalEntry.date >= from_date)
        if to_date is not None:
            stmt = stmt.where(JournalEntry.date <= to_date)
        return stmt

    def list_entries(
        self,
        actor: AuthContext,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> list[JournalEntry]:
        """Entries dated within the inclusive range, newest first."""
        require_permission(actor, Permission.REPORT_VIEW)
        stmt = self._range_query(from_date, to_date).order_by(
            JournalEntry.date.desc(), JournalEntry.serial_number.desc()
        )
        return list(self.db.execute(stmt).scalars().all())

    def active_entries(
        self,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> list[JournalEntry]:
        """
        Entries that count toward balances, oldest first.

        Cancelled and superseded entries never count. DRAFT
        entries count unless REPORTS_INCLUDE_DRAFTS is off.
        """
        stmt = self._range_query(from_date, to_date).where(
            JournalEntry.status != EntryStatus.CANCELLED,
            JournalEntry.replaced_by.is_(None),
        )
        if not self.settings.REPORTS_INCLUDE_DRAFTS:
            stmt = stmt.where(JournalEntry.status != EntryStatus.DRAFT)
        stmt = stmt.order_by(JournalEntry.date, JournalEntry.serial_number)
        return list(self.db.execute(stmt).scalars().all())
