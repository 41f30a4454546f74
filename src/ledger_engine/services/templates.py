"""Reusable journal entry templates."""

import logging
from datetime import date
from decimal import Decimal

from ledger_engine.builders import JournalEntryBuilder
from ledger_engine.exceptions import ValidationError
from ledger_engine.models import JournalEntry, JournalEntryTemplate
from ledger_engine.money import to_decimal
from ledger_engine.services.accounts import AccountLedger
from ledger_engine.services.base import BaseService
from ledger_engine.services.journal import JournalEntryEngine
from ledger_engine.storage.store import LedgerStore

logger = logging.getLogger(__name__)


class TemplateService(BaseService):
    """Two-line entry templates (rent, payroll, bank fees...).

    Example:
        rent = ledger.templates.save(
            JournalEntryTemplate("Monthly rent", expense.id, cash.id, default_amount=Decimal("900"))
        )
        entry = ledger.templates.create_from_template(rent.id, date(2025, 2, 1))
        ledger.journal.post(entry.id)
    """

    def __init__(
        self,
        store: LedgerStore,
        config,
        accounts: AccountLedger,
        journal: JournalEntryEngine,
    ) -> None:
        super().__init__(store, config)
        self.accounts = accounts
        self.journal = journal

    def save(self, template: JournalEntryTemplate) -> JournalEntryTemplate:
        """Insert or update a template after checking both accounts exist."""
        logger.info("Saving template: %s", template.name)
        template.name = (template.name or "").strip()
        if not template.name:
            raise ValidationError("Template name cannot be empty", field="name")
        if template.debit_account_id == template.credit_account_id:
            raise ValidationError("Debit and credit accounts must differ", field="credit_account_id")
        if template.default_amount is not None:
            template.default_amount = to_decimal(template.default_amount, field="default_amount")
            if template.default_amount <= 0:
                raise ValidationError("Default amount must be positive", field="default_amount")

        with self.store.transaction():
            self.accounts.get(template.debit_account_id)
            self.accounts.get(template.credit_account_id)
            if template.id is None:
                self.store.templates.save(template)
            else:
                self.store.templates.update(template)
        return template

    def deactivate(self, template_id: int) -> JournalEntryTemplate:
        with self.store.transaction():
            template = self.get(template_id)
            template.active = False
            self.store.templates.update(template)
        return template

    def delete(self, template_id: int) -> None:
        with self.store.transaction():
            self.store.templates.delete(self.get(template_id))
        logger.info("Template %s deleted", template_id)

    def create_from_template(
        self,
        template_id: int,
        entry_date: date,
        amount: Decimal | int | str | None = None,
        description: str | None = None,
    ) -> JournalEntry:
        """Record a draft entry from a template.

        ``amount`` falls back to the template's default amount; the entry
        is left unposted and carries the reference ``TPL-<id>``.
        """
        template = self.get(template_id)
        value = amount if amount is not None else template.default_amount
        if value is None:
            raise ValidationError(f"Template {template.name!r} has no default amount")

        debit = self.accounts.get(template.debit_account_id)
        credit = self.accounts.get(template.credit_account_id)
        draft = (
            JournalEntryBuilder(entry_date, description or template.description or template.name)
            .reference(f"TPL-{template.id}")
            .debit(debit.code, value)
            .credit(credit.code, value)
            .build()
        )
        logger.info("Creating entry from template %s", template.name)
        return self.journal.record(draft)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, template_id: int) -> JournalEntryTemplate:
        return self.store.templates.get(template_id)

    def find_by_id(self, template_id: int) -> JournalEntryTemplate | None:
        return self.store.templates.find_by_id(template_id)

    def find_all(self) -> list[JournalEntryTemplate]:
        return self.store.templates.find_all()

    def find_all_active(self) -> list[JournalEntryTemplate]:
        return self.store.templates.find_active()

    def search_by_name(self, fragment: str) -> list[JournalEntryTemplate]:
        return self.store.templates.search_by_name(fragment)
