"""
Document service: creating business documents and posting them.

Creating an APPROVED or PAID document posts it:
1. Pick the posting rule for the document type
2. Resolve every account the rule needs (ConfigurationError if missing)
3. Build the journal lines and validate the entry (balance, period lock)
4. Add the document and its entry to the session and flush once
5. Write the entry id back onto the document

Steps 1–3 touch nothing in the session, so a failure leaves
neither a document nor an entry behind. The caller commits the
pair, or rolls it back, as one unit.
"""

import logging
import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from accounting_core.config import Settings, get_settings
from accounting_core.exceptions import (
    NotFoundError,
    SerialConflictError,
    ValidationError,
)
from accounting_core.models.document import AccountingDocument, DocumentItem
from accounting_core.models.enums import (
    AuditAction,
    AuditEntityType,
    DocumentType,
    EntryStatus,
    POSTED_DOCUMENT_STATUSES,
)
from accounting_core.models.ledger_account import Account
from accounting_core.schemas.document import DocumentCreate
from accounting_core.schemas.ledger import JournalEntryCreate
from accounting_core.security import AuthContext, Permission, require_permission
from accounting_core.services.audit_service import AuditService
from accounting_core.services.chart_service import ChartOfAccountsService
from accounting_core.services.journal_service import (
    JournalService,
    next_serial,
    to_amount,
)
from accounting_core.services.posting_rules import AccountResolver, get_posting_rule

logger = logging.getLogger(__name__)

# Each document type numbers its serials independently
DOC_SERIAL_PREFIX = {
    DocumentType.INVOICE: "INV",
    DocumentType.PURCHASE_INV: "PINV",
    DocumentType.RECEIPT: "RCP",
    DocumentType.QUOTE: "QOT",
    DocumentType.DEPOSIT: "DEP",
    DocumentType.PAYMENT: "PAY",
    DocumentType.PURCHASE_ORDER: "PO",
}


class DocumentService:

    def __init__(self, db: Session, settings: Settings | None = None):
        self.db = db
        self.settings = settings or get_settings()
        self.chart = ChartOfAccountsService(db)
        self.journal = JournalService(db, self.settings)
        self.audit = AuditService(db, self.settings)

    def _next_serial(self, doc_type: DocumentType, doc_date: date) -> str:
        prefix = f"{DOC_SERIAL_PREFIX.get(doc_type, 'DOC')}-{doc_date.year}-"
        return next_serial(
            self.db,
            AccountingDocument.serial_number,
            prefix,
            AccountingDocument.doc_type == doc_type,
        )

    def _resolve_serial(self, request: DocumentCreate) -> str:
        serial = (request.serial_number or "").strip()
        if not serial:
            return self._next_serial(request.type, request.date)

        taken = self.db.execute(
            select(AccountingDocument.id).where(
                AccountingDocument.doc_type == request.type,
                AccountingDocument.serial_number == serial,
            ).limit(1)
        ).scalar_one_or_none()
        if taken is not None:
            raise ValidationError(
                f"{request.type.value} serial number {serial} is already in use"
            )
        return serial

    @staticmethod
    def _resolve_amounts(request: DocumentCreate) -> tuple[Decimal, Decimal, Decimal]:
        """Return (amount, vat_amount, total_amount), checking they reconcile."""
        amount = to_amount(request.amount)

        if request.vat_amount is not None:
            vat_amount = to_amount(request.vat_amount)
        elif request.vat_rate:
            vat_amount = to_amount(amount * request.vat_rate / Decimal("100"))
        else:
            vat_amount = to_amount(0)

        if request.total_amount is not None:
            total_amount = to_amount(request.total_amount)
            if total_amount != amount + vat_amount:
                raise ValidationError(
                    f"total_amount {total_amount} does not equal "
                    f"amount {amount} + VAT {vat_amount}"
                )
        else:
            total_amount = amount + vat_amount

        return amount, vat_amount, total_amount

    def _validate_item_accounts(self, request: DocumentCreate) -> None:
        account_ids = {i.account_id for i in request.items if i.account_id is not None}
        if not account_ids:
            return
        found = set(self.db.execute(
            select(Account.id).where(Account.id.in_(account_ids))
        ).scalars().all())
        missing = account_ids - found
        if missing:
            raise ValidationError(f"Item accounts not found: {sorted(missing)}")

    def create_document(
        self, request: DocumentCreate, actor: AuthContext
    ) -> AccountingDocument:
        """
        Create a document, posting it when it is APPROVED or PAID.

        Returns the document with journal_entry_id set once posted.
        """
        require_permission(actor, Permission.DOCUMENT_CREATE)

        rule = get_posting_rule(request.type)
        must_post = request.status in POSTED_DOCUMENT_STATUSES
        if must_post and rule is None:
            raise ValidationError(
                f"{request.type.value} documents are not posted to the ledger "
                f"and cannot be created as {request.status.value}"
            )

        amount, vat_amount, total_amount = self._resolve_amounts(request)
        self._validate_item_accounts(request)

        document = AccountingDocument(
            id=uuid.uuid4(),
            serial_number=self._resolve_serial(request),
            doc_type=request.type,
            status=request.status,
            date=request.date,
            due_date=request.due_date,
            contact_id=request.contact_id,
            bank_account_id=request.bank_account_id,
            property_id=request.property_id,
            project_id=request.project_id,
            amount=amount,
            currency=request.currency or self.settings.DEFAULT_CURRENCY,
            vat_rate=request.vat_rate,
            vat_amount=vat_amount,
            total_amount=total_amount,
            description_ar=request.description_ar,
            description_en=request.description_en,
            reference=request.reference,
            attachments=[a.model_dump() for a in request.attachments],
        )
        document.items = [
            DocumentItem(
                position=position,
                description_ar=item.description_ar,
                description_en=item.description_en,
                quantity=item.quantity,
                unit_price=item.unit_price,
                amount=to_amount(item.amount),
                account_id=item.account_id,
            )
            for position, item in enumerate(request.items)
        ]

        entry = None
        if must_post:
            lines = rule.build_lines(document, AccountResolver(self.chart))
            desc_ar, desc_en = rule.descriptions(document)
            entry = self.journal.build_entry(JournalEntryCreate(
                date=document.date,
                status=EntryStatus.APPROVED,
                lines=lines,
                description_ar=desc_ar,
                description_en=desc_en,
                document_type=document.doc_type,
                document_id=document.id,
                contact_id=document.contact_id,
                bank_account_id=document.bank_account_id,
                property_id=document.property_id,
                project_id=document.project_id,
            ))
            document.journal_entry = entry
            document.journal_entry_id = entry.id

        # Everything is validated; stage the document and its entry together
        self.db.add(document)
        if entry is not None:
            self.journal.record_entry(
                entry, actor, reason=f"Posting of {document.serial_number}"
            )
        else:
            try:
                self.db.flush()
            except IntegrityError as e:
                raise SerialConflictError(document.serial_number) from e

        self.audit.append(
            AuditAction.CREATE,
            AuditEntityType.DOCUMENT,
            document.id,
            user_id=actor.user_id,
            new_state={
                "serial_number": document.serial_number,
                "type": document.doc_type.value,
                "status": document.status.value,
                "total_amount": str(document.total_amount),
                "journal_entry_id": str(entry.id) if entry else None,
            },
        )
        logger.info(
            "Created document %s (%s, %s)%s",
            document.serial_number,
            document.doc_type.value,
            document.status.value,
            f" posted as {entry.serial_number}" if entry else "",
        )
        return document

    def get_document(self, document_id) -> AccountingDocument:
        document = self.db.get(AccountingDocument, document_id)
        if document is None:
            raise NotFoundError("Document", document_id)
        return document

    def list_documents(
        self,
        actor: AuthContext,
        from_date: date | None = None,
        to_date: date | None = None,
        doc_type: DocumentType | None = None,
    ) -> list[AccountingDocument]:
        """Documents in the date range, newest first."""
        require_permission(actor, Permission.REPORT_VIEW)

        stmt = select(AccountingDocument).options(
            selectinload(AccountingDocument.items)
        )
        if from_date is not None:
            stmt = stmt.where(AccountingDocument.date >= from_date)
        if to_date is not None:
            stmt = stmt.where(AccountingDocument.date <= to_date)
        if doc_type is not None:
            stmt = stmt.where(AccountingDocument.doc_type == doc_type)
        stmt = stmt.order_by(
            AccountingDocument.date.desc(), AccountingDocument.serial_number.desc()
        )
        return list(self.db.execute(stmt).scalars().all())
