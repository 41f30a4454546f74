"""Customer and supplier records."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class PartyKind(StrEnum):
    CUSTOMER = "customer"
    SUPPLIER = "supplier"


@dataclass
class Party:
    """A trading counterparty: a customer or a supplier.

    Sale invoices reference customers, purchase invoices reference suppliers.
    """

    kind: PartyKind
    code: str
    name: str
    tax_id: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    active: bool = True
    id: int | None = None
    version: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
