"""Tests for the domain models."""

import dataclasses

import pytest

from models.invoice import Invoice, Item


def test_customer_is_immutable(customer):
    with pytest.raises(dataclasses.FrozenInstanceError):
        customer.last_name = "Other"


def test_customer_str(customer):
    assert str(customer) == "#1 Jumbo Eagle | 111 E. Las Olivas Blvd, Fort Lauderdale"


def test_invoice_str():
    invoice = Invoice(id=42, customer_id=1, total=25.0, items=[Item(42, 0, 10, 5, 5.0, 25.0)])

    assert str(invoice) == "Invoice #42 | customer 1 | 1 items | 25.00"


def test_invoice_items_are_not_shared():
    assert Invoice(1, 1).items is not Invoice(2, 1).items
