"""Shared fixtures: a fake data source handing out mocked psycopg2 connections."""

from unittest.mock import MagicMock

import pytest

from models.customer import Customer
from repositories.invoice_repo import InvoiceRepository


@pytest.fixture
def mock_cursor():
    """Cursor returned by ``with conn.cursor() as cur``."""
    cursor = MagicMock()
    cursor.rowcount = 1
    return cursor


@pytest.fixture
def mock_conn(mock_cursor):
    """Connection in auto-commit mode, as the data source hands it out."""
    conn = MagicMock()
    conn.autocommit = True
    conn.closed = 0
    conn.cursor.return_value.__enter__.return_value = mock_cursor
    conn.cursor.return_value.__exit__.return_value = False
    return conn


@pytest.fixture
def data_source(mock_conn):
    source = MagicMock()
    source.get_connection.return_value = mock_conn
    return source


@pytest.fixture
def repo(data_source):
    return InvoiceRepository(data_source)


@pytest.fixture
def customer():
    return Customer(id=1, first_name="Jumbo", last_name="Eagle", street="111 E. Las Olivas Blvd", city="Fort Lauderdale")
