"""
db/init_db.py
-------------
Creates the customer/invoice schema (tables and triggers) on a fresh
development database. Run this module directly:
    python -m db.init_db
"""

from db.connection import get_data_source
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Customers: only the identity, name and address columns are read
CREATE TABLE IF NOT EXISTS Customer (
    ID              INTEGER PRIMARY KEY,
    FirstName       VARCHAR(50),
    LastName        VARCHAR(50),
    Street          VARCHAR(100),
    City            VARCHAR(50)
);

-- Products: only Price is read when invoicing
CREATE TABLE IF NOT EXISTS Product (
    ID              INTEGER PRIMARY KEY,
    Name            VARCHAR(100),
    Price           NUMERIC(12,2) NOT NULL
);

-- Invoices: Total is maintained by trg_item_total
CREATE TABLE IF NOT EXISTS Invoice (
    ID              SERIAL PRIMARY KEY,
    CustomerID      INTEGER NOT NULL REFERENCES Customer(ID),
    Total           NUMERIC(12,2) NOT NULL DEFAULT 0
);

-- Invoice lines: Cost is computed by trg_item_cost
CREATE TABLE IF NOT EXISTS Item (
    InvoiceID       INTEGER NOT NULL REFERENCES Invoice(ID),
    LineIndex       INTEGER NOT NULL,
    ProductID       INTEGER NOT NULL REFERENCES Product(ID),
    Quantity        INTEGER NOT NULL,
    UnitPrice       NUMERIC(12,2) NOT NULL,
    Cost            NUMERIC(12,2),
    PRIMARY KEY (InvoiceID, LineIndex)
);

CREATE INDEX IF NOT EXISTS idx_invoice_customer ON Invoice(CustomerID);
CREATE INDEX IF NOT EXISTS idx_customer_city ON Customer(City);

CREATE OR REPLACE FUNCTION item_cost() RETURNS trigger AS $$
BEGIN
    NEW.Cost := NEW.Quantity * NEW.UnitPrice;
    RETURN NEW;
END;
$$ LANGUAGE plpgsql;

CREATE OR REPLACE FUNCTION invoice_total() RETURNS trigger AS $$
BEGIN
    UPDATE Invoice SET Total = Total + NEW.Cost WHERE ID = NEW.InvoiceID;
    RETURN NEW;
END;
$$ LANGUAGE plpgsql;

DROP TRIGGER IF EXISTS trg_item_cost ON Item;
CREATE TRIGGER trg_item_cost BEFORE INSERT ON Item
    FOR EACH ROW EXECUTE FUNCTION item_cost();

DROP TRIGGER IF EXISTS trg_item_total ON Item;
CREATE TRIGGER trg_item_total AFTER INSERT ON Item
    FOR EACH ROW EXECUTE FUNCTION invoice_total();
"""


def create_tables(data_source=None) -> None:
    """
    Execute the schema SQL to create all tables and triggers.
    Safe to call multiple times (uses IF NOT EXISTS / OR REPLACE).

    Args:
        data_source: Connection provider; defaults to the process-wide pool.
    """
    data_source = data_source or get_data_source()
    conn = data_source.get_connection()
    try:
        conn.autocommit = False
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)
        conn.commit()
        logger.info("Database schema initialized successfully.")
    except Exception as e:
        conn.rollback()
        logger.error(f"Failed to initialize schema: {e}")
        raise
    finally:
        if not conn.closed:
            conn.autocommit = True
        data_source.release_connection(conn)


if __name__ == "__main__":
    from db.connection import init_pool, close_pool
    init_pool()
    try:
        create_tables()
    finally:
        close_pool()
    print("Database schema created successfully.")
