"""
repositories/invoice_repo.py
-----------------------------
Data access layer for customers, invoices and invoice items.
All SQL queries against the Customer, Invoice, Item and Product tables live here.
"""

from typing import Optional, Sequence

import psycopg2

from db.connection import get_data_source
from models.customer import Customer
from models.invoice import Invoice, Item
from utils.logger import get_logger

logger = get_logger(__name__)


class InvoiceValidationError(ValueError):
    """Raised when invoice input is rejected before touching the database."""


class InvoiceWriteError(Exception):
    """Raised when an invoice line could not be written."""


class InvoiceRepository:
    """
    Repository for customer queries and invoice creation.

    Each method borrows its own connection from the data source and gives it
    back before returning, whatever the outcome.
    """

    def __init__(self, data_source=None):
        """
        Args:
            data_source: Object exposing ``get_connection()`` and
                ``release_connection(conn)``. Defaults to the process-wide pool.
        """
        self._data_source = data_source

    @property
    def data_source(self):
        if self._data_source is None:
            self._data_source = get_data_source()
        return self._data_source

    # ── CUSTOMERS ─────────────────────────────────────────

    def name_of_customer(self, customer_id: int) -> Optional[str]:
        """
        Get a customer's last name.

        Returns:
            The LastName column, or None if no customer has this id.
        """
        sql = "SELECT LastName FROM Customer WHERE ID = %s;"
        conn = self.data_source.get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (customer_id,))
                row = cur.fetchone()
                return row[0] if row else None
        finally:
            self.data_source.release_connection(conn)

    def number_of_customers(self) -> int:
        """Count the rows of the Customer table."""
        sql = "SELECT COUNT(*) FROM Customer;"
        conn = self.data_source.get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
                return int(cur.fetchone()[0])
        finally:
            self.data_source.release_connection(conn)

    def find_customer(self, customer_id: int) -> Optional[Customer]:
        """
        Fetch a single customer by primary key.

        Returns:
            A Customer, or None if not found.
        """
        sql = "SELECT ID, FirstName, LastName, Street, City FROM Customer WHERE ID = %s;"
        conn = self.data_source.get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (customer_id,))
                row = cur.fetchone()
                return self._row_to_customer(row) if row else None
        finally:
            self.data_source.release_connection(conn)

    def customers_in_city(self, city: str) -> list[Customer]:
        """
        Get all customers living in a city.

        The comparison is plain SQL equality, so it is exact and case-sensitive.
        No ordering is applied.
        """
        sql = "SELECT ID, FirstName, LastName, Street, City FROM Customer WHERE City = %s;"
        conn = self.data_source.get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (city,))
                return [self._row_to_customer(r) for r in cur.fetchall()]
        finally:
            self.data_source.release_connection(conn)

    # ── INVOICES ──────────────────────────────────────────

    def total_for_customer(self, customer_id: int) -> float:
        """
        Get the sum of a customer's invoice totals.

        Returns:
            The sum, or 0.0 when the customer has no invoice or does not exist.
        """
        sql = "SELECT COALESCE(SUM(Total), 0) FROM Invoice WHERE CustomerID = %s;"
        conn = self.data_source.get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (customer_id,))
                return float(cur.fetchone()[0])
        finally:
            self.data_source.release_connection(conn)

    def number_of_invoices_for_customer(self, customer_id: int) -> int:
        """Count a customer's invoices (0 if none)."""
        sql = "SELECT COUNT(*) FROM Invoice WHERE CustomerID = %s;"
        conn = self.data_source.get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (customer_id,))
                return int(cur.fetchone()[0])
        finally:
            self.data_source.release_connection(conn)

    def find_invoice(self, invoice_id: int) -> Optional[Invoice]:
        """
        Fetch an invoice together with its items.

        Returns:
            An Invoice whose items are ordered by line index, or None if not found.
        """
        invoice_sql = "SELECT ID, CustomerID, Total FROM Invoice WHERE ID = %s;"
        conn = self.data_source.get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(invoice_sql, (invoice_id,))
                row = cur.fetchone()
                if row is None:
                    return None
                invoice = Invoice(id=row[0], customer_id=row[1], total=float(row[2]) if row[2] is not None else 0.0)
                cur.execute(self._ITEMS_SQL, (invoice_id,))
                invoice.items = [self._row_to_item(r) for r in cur.fetchall()]
                return invoice
        finally:
            self.data_source.release_connection(conn)

    def items_of_invoice(self, invoice_id: int) -> list[Item]:
        """Get the lines of an invoice, ordered by line index."""
        conn = self.data_source.get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(self._ITEMS_SQL, (invoice_id,))
                return [self._row_to_item(r) for r in cur.fetchall()]
        finally:
            self.data_source.release_connection(conn)

    def create_invoice(
        self, customer: Customer, product_ids: Sequence[int], quantities: Sequence[int]
    ) -> int:
        """
        Create an invoice and its items in a single transaction.

        Line ``i`` gets product ``product_ids[i]``, quantity ``quantities[i]``
        and the product's current price. The invoice total and line costs
        are filled in by database triggers.

        Args:
            customer: The invoiced customer.
            product_ids: Product of each line.
            quantities: Quantity of each line, same length as product_ids.

        Returns:
            The generated invoice id.

        Raises:
            InvoiceValidationError: If the two sequences differ in length.
                Nothing is written in that case.
            InvoiceWriteError: If a product has no price or a line insert
                affects no row. The whole invoice is rolled back.
        """
        if len(product_ids) != len(quantities):
            raise InvoiceValidationError(
                f"{len(product_ids)} product ids but {len(quantities)} quantities"
            )

        invoice_sql = "INSERT INTO Invoice (CustomerID) VALUES (%s) RETURNING ID;"
        price_sql = "SELECT Price FROM Product WHERE ID = %s;"
        item_sql = """
            INSERT INTO Item (InvoiceID, LineIndex, ProductID, Quantity, UnitPrice)
            VALUES (%s, %s, %s, %s, %s);
        """
        conn = self.data_source.get_connection()
        try:
            conn.autocommit = False
            try:
                with conn.cursor() as cur:
                    cur.execute(invoice_sql, (customer.id,))
                    invoice_id = cur.fetchone()[0]

                    for index, (product_id, quantity) in enumerate(zip(product_ids, quantities)):
                        cur.execute(price_sql, (product_id,))
                        row = cur.fetchone()
                        if row is None:
                            raise InvoiceWriteError(f"No price for product {product_id}")
                        cur.execute(item_sql, (invoice_id, index, product_id, quantity, row[0]))
                        if cur.rowcount == 0:
                            raise InvoiceWriteError(
                                f"Line {index} of invoice #{invoice_id} was not inserted"
                            )
                conn.commit()
            except Exception as e:
                logger.error(f"Failed to create invoice for customer {customer.id}: {e}")
                # A dropped connection has nothing left to roll back.
                if not conn.closed:
                    try:
                        conn.rollback()
                    except psycopg2.Error as rollback_error:
                        logger.error(f"Rollback for customer {customer.id} failed: {rollback_error}")
                raise
            finally:
                if not conn.closed:
                    conn.autocommit = True
        finally:
            self.data_source.release_connection(conn)

        logger.info(
            f"Created invoice #{invoice_id} with {len(product_ids)} items for customer {customer.id}"
        )
        return invoice_id

    # ── HELPERS ───────────────────────────────────────────

    _ITEMS_SQL = """
        SELECT InvoiceID, LineIndex, ProductID, Quantity, UnitPrice, Cost
        FROM Item
        WHERE InvoiceID = %s
        ORDER BY LineIndex;
    """

    @staticmethod
    def _row_to_customer(row: tuple) -> Customer:
        """Convert a (ID, FirstName, LastName, Street, City) row to a Customer."""
        return Customer(
            id=row[0],
            first_name=row[1],
            last_name=row[2],
            street=row[3],
            city=row[4],
        )

    @staticmethod
    def _row_to_item(row: tuple) -> Item:
        """Convert an Item row tuple to an Item domain object."""
        return Item(
            invoice_id=row[0],
            line_index=row[1],
            product_id=row[2],
            quantity=row[3],
            unit_price=float(row[4]),
            cost=float(row[5]) if row[5] is not None else None,
        )
