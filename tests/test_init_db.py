"""Tests for the development schema bootstrap."""

import psycopg2
import pytest

from db.init_db import SCHEMA_SQL, create_tables


class TestSchema:

    @pytest.mark.parametrize("table", ["Customer", "Product", "Invoice", "Item"])
    def test_declares_table(self, table):
        assert f"CREATE TABLE IF NOT EXISTS {table} (" in SCHEMA_SQL

    def test_declares_triggers(self):
        assert "CREATE TRIGGER trg_item_cost BEFORE INSERT ON Item" in SCHEMA_SQL
        assert "CREATE TRIGGER trg_item_total AFTER INSERT ON Item" in SCHEMA_SQL
        assert "PRIMARY KEY (InvoiceID, LineIndex)" in SCHEMA_SQL

    def test_line_cost_is_quantity_times_unit_price(self):
        assert "NEW.Cost := NEW.Quantity * NEW.UnitPrice;" in SCHEMA_SQL

    def test_invoice_total_accumulates_line_costs(self):
        assert "UPDATE Invoice SET Total = Total + NEW.Cost WHERE ID = NEW.InvoiceID;" in SCHEMA_SQL
        assert "Total           NUMERIC(12,2) NOT NULL DEFAULT 0" in SCHEMA_SQL


class TestCreateTables:

    def test_executes_schema_and_commits(self, data_source, mock_conn, mock_cursor):
        create_tables(data_source)

        mock_cursor.execute.assert_called_once_with(SCHEMA_SQL)
        mock_conn.commit.assert_called_once()
        assert mock_conn.autocommit is True
        data_source.release_connection.assert_called_once_with(mock_conn)

    def test_rolls_back_on_failure(self, data_source, mock_conn, mock_cursor):
        mock_cursor.execute.side_effect = psycopg2.ProgrammingError("syntax error")

        with pytest.raises(psycopg2.ProgrammingError):
            create_tables(data_source)

        mock_conn.rollback.assert_called_once()
        mock_conn.commit.assert_not_called()
        data_source.release_connection.assert_called_once_with(mock_conn)
