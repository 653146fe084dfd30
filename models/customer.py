"""
models/customer.py
------------------
Domain model for customers.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Customer:
    """
    A customer as loaded from the Customer table.

    Attributes:
        id: Database primary key.
        first_name: Given name.
        last_name: Family name.
        street: Street part of the address.
        city: City part of the address.
    """
    id: int
    first_name: str
    last_name: str
    street: str
    city: str

    @property
    def address(self) -> str:
        return f"{self.street}, {self.city}"

    def __str__(self) -> str:
        return f"#{self.id} {self.first_name} {self.last_name} | {self.address}"
