"""
models/invoice.py
-----------------
Domain models for invoices and their line items.
Totals and line costs are computed by database triggers, never here.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Item:
    """
    One line of an invoice.

    Attributes:
        invoice_id: Owning invoice.
        line_index: Position of the line in the invoice, starting at 0.
        product_id: Invoiced product.
        quantity: Number of units.
        unit_price: Product price captured when the invoice was created.
        cost: quantity * unit_price, as stored by the database.
    """
    invoice_id: int
    line_index: int
    product_id: int
    quantity: int
    unit_price: float
    cost: Optional[float] = None


@dataclass
class Invoice:
    """
    An invoice and, when loaded together, its items.

    Attributes:
        id: Database-generated primary key.
        customer_id: Owning customer.
        total: Sum of the item costs, as stored by the database.
        items: Lines ordered by line_index.
    """
    id: int
    customer_id: int
    total: float = 0.0
    items: list[Item] = field(default_factory=list)

    def __str__(self) -> str:
        return f"Invoice #{self.id} | customer {self.customer_id} | {len(self.items)} items | {self.total:.2f}"
