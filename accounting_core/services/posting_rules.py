"""
Posting rules: how each document type becomes journal lines.

One rule class per document type, looked up in POSTING_RULES.
A rule only builds lines; validating and persisting the entry
is the JournalService's job. Every account a rule needs is
resolved before the first line is built, so a missing account
aborts the posting with ConfigurationError and nothing else.

    RECEIPT / INVOICE   Dr Cash|Bank (total)   Cr Revenue (amount)   Cr VAT (vat)
    PURCHASE_INV        Dr item accounts / Expense (amount)   Dr VAT (vat)   Cr Payables (total)
    PAYMENT             Dr Expense (total)     Cr Cash|Bank (total)
    DEPOSIT             Dr Cash|Bank (total)   Cr Deposits payable (total)
"""

from decimal import Decimal

from accounting_core.exceptions import ValidationError
from accounting_core.models.document import AccountingDocument
from accounting_core.models.enums import DocumentType
from accounting_core.models.ledger_account import Account
from accounting_core.schemas.ledger import JournalLineCreate
from accounting_core.services.chart_service import (
    BANK_CODE,
    CASH_CODE,
    DEPOSITS_PAYABLE_CODE,
    EXPENSE_CODE,
    PAYABLES_CODE,
    REVENUE_CODE,
    VAT_PAYABLE_CODE,
    ChartOfAccountsService,
)

ZERO = Decimal("0")


class AccountResolver:
    """Looks up well-known accounts by code, once per code."""

    def __init__(self, chart: ChartOfAccountsService):
        self.chart = chart
        self._cache: dict[str, Account] = {}

    def get(self, code: str) -> Account:
        if code not in self._cache:
            self._cache[code] = self.chart.require_account(code)
        return self._cache[code]

    def cash_or_bank(self, document: AccountingDocument) -> Account:
        """Bank when the document names a bank account, else Cash."""
        return self.get(BANK_CODE if document.bank_account_id else CASH_CODE)


def _debit(account_id: int, amount: Decimal, description_ar=None, description_en=None):
    return JournalLineCreate(
        account_id=account_id,
        debit=amount,
        credit=ZERO,
        description_ar=description_ar,
        description_en=description_en,
    )


def _credit(account_id: int, amount: Decimal, description_ar=None, description_en=None):
    return JournalLineCreate(
        account_id=account_id,
        debit=ZERO,
        credit=amount,
        description_ar=description_ar,
        description_en=description_en,
    )


class PostingRule:
    """Base class: turns a document into a list of journal lines."""

    label_ar = "مستند"
    label_en = "Document"

    def build_lines(
        self, document: AccountingDocument, resolver: AccountResolver
    ) -> list[JournalLineCreate]:
        raise NotImplementedError

    def descriptions(self, document: AccountingDocument) -> tuple[str, str]:
        return (
            document.description_ar or f"{self.label_ar} {document.serial_number}",
            document.description_en or f"{self.label_en} {document.serial_number}",
        )

    @staticmethod
    def vat_descriptions(document: AccountingDocument) -> tuple[str, str]:
        return (
            f"ضريبة {document.serial_number}",
            f"VAT {document.serial_number}",
        )


class ReceiptRule(PostingRule):
    """Money in against revenue, with output VAT on its own line."""

    label_ar = "إيصال"
    label_en = "Receipt"

    def build_lines(self, document, resolver):
        debit_account = resolver.cash_or_bank(document)
        revenue = resolver.get(REVENUE_CODE)
        vat = resolver.get(VAT_PAYABLE_CODE) if document.vat_amount > 0 else None

        desc_ar, desc_en = self.descriptions(document)
        lines = [
            _debit(debit_account.id, document.total_amount, desc_ar, desc_en),
            _credit(revenue.id, document.amount, desc_ar, desc_en),
        ]
        if vat is not None:
            lines.append(_credit(vat.id, document.vat_amount, *self.vat_descriptions(document)))
        return lines


class InvoiceRule(ReceiptRule):
    label_ar = "فاتورة"
    label_en = "Invoice"


class PurchaseInvoiceRule(PostingRule):
    """
    Supplier invoice: cost against payables.

    Items carrying an account_id are debited to that account;
    whatever part of the amount they leave unallocated goes to
    the default expense account. Input VAT is debited to the
    VAT account.
    """

    label_ar = "فاتورة مشتريات"
    label_en = "Purchase invoice"

    def build_lines(self, document, resolver):
        payables = resolver.get(PAYABLES_CODE)
        expense = resolver.get(EXPENSE_CODE)
        vat = resolver.get(VAT_PAYABLE_CODE) if document.vat_amount > 0 else None

        desc_ar, desc_en = self.descriptions(document)
        lines: list[JournalLineCreate] = []

        if any(item.account_id for item in document.items):
            allocated = ZERO
            for item in document.items:
                if item.account_id and item.amount > 0:
                    lines.append(_debit(
                        item.account_id,
                        item.amount,
                        item.description_ar or desc_ar,
                        item.description_en or desc_en,
                    ))
                    allocated += item.amount
            if allocated > document.amount:
                raise ValidationError(
                    f"Item allocations {allocated} exceed document amount "
                    f"{document.amount}"
                )
            if allocated < document.amount:
                lines.append(_debit(expense.id, document.amount - allocated, desc_ar, desc_en))
        else:
            lines.append(_debit(expense.id, document.amount, desc_ar, desc_en))

        if vat is not None:
            lines.append(_debit(vat.id, document.vat_amount, *self.vat_descriptions(document)))

        lines.append(_credit(payables.id, document.total_amount, desc_ar, desc_en))
        return lines


class PaymentRule(PostingRule):
    label_ar = "دفعة"
    label_en = "Payment"

    def build_lines(self, document, resolver):
        expense = resolver.get(EXPENSE_CODE)
        credit_account = resolver.cash_or_bank(document)

        desc_ar, desc_en = self.descriptions(document)
        return [
            _debit(expense.id, document.total_amount, desc_ar, desc_en),
            _credit(credit_account.id, document.total_amount, desc_ar, desc_en),
        ]


class DepositRule(PostingRule):
    """A deposit received is held as a liability until applied."""

    label_ar = "عربون"
    label_en = "Deposit"

    def build_lines(self, document, resolver):
        debit_account = resolver.cash_or_bank(document)
        deposits = resolver.get(DEPOSITS_PAYABLE_CODE)

        desc_ar, desc_en = self.descriptions(document)
        return [
            _debit(debit_account.id, document.total_amount, desc_ar, desc_en),
            _credit(deposits.id, document.total_amount, desc_ar, desc_en),
        ]


POSTING_RULES: dict[DocumentType, PostingRule] = {
    DocumentType.RECEIPT: ReceiptRule(),
    DocumentType.INVOICE: InvoiceRule(),
    DocumentType.PURCHASE_INV: PurchaseInvoiceRule(),
    DocumentType.PAYMENT: PaymentRule(),
    DocumentType.DEPOSIT: DepositRule(),
}


def get_posting_rule(doc_type: DocumentType) -> PostingRule | None:
    """The rule for a document type, or None when the type never posts."""
    return POSTING_RULES.get(doc_type)
