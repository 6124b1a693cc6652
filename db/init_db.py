"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from db.connection import get_connection, release_connection
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Users table: account credentials and profile
CREATE TABLE IF NOT EXISTS users (
    id              SERIAL PRIMARY KEY,
    name            VARCHAR(100) NOT NULL,
    email           VARCHAR(255) UNIQUE NOT NULL,
    password_hash   VARCHAR(255) NOT NULL,
    avatar_color    VARCHAR(30) DEFAULT 'emerald',
    created_at      TIMESTAMPTZ DEFAULT NOW()
);

-- Recurring rules: templates the engine materializes into transactions
CREATE TABLE IF NOT EXISTS recurring_rules (
    id              SERIAL PRIMARY KEY,
    user_id         INT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    title           VARCHAR(200) NOT NULL,
    amount          NUMERIC(12,2) NOT NULL CHECK (amount >= 0),
    type            VARCHAR(10) NOT NULL CHECK (type IN ('expense', 'income')),
    category        VARCHAR(100) NOT NULL,
    payment_method  VARCHAR(20) NOT NULL DEFAULT 'other'
                    CHECK (payment_method IN ('cash', 'card', 'upi', 'bank_transfer', 'other')),
    frequency       VARCHAR(20) NOT NULL CHECK (frequency IN ('daily', 'weekly', 'monthly', 'yearly')),
    interval_count  INT NOT NULL DEFAULT 1 CHECK (interval_count >= 1),
    start_date      DATE NOT NULL,
    end_date        DATE,
    last_executed_at DATE,
    status          VARCHAR(10) NOT NULL DEFAULT 'active' CHECK (status IN ('active', 'paused')),
    created_at      TIMESTAMPTZ DEFAULT NOW(),
    updated_at      TIMESTAMPTZ DEFAULT NOW()
);

-- Transactions table: the ledger (user-created and engine-generated entries)
CREATE TABLE IF NOT EXISTS transactions (
    id              SERIAL PRIMARY KEY,
    user_id         INT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    type            VARCHAR(10) NOT NULL CHECK (type IN ('expense', 'income')),
    amount          NUMERIC(12,2) NOT NULL CHECK (amount >= 0),
    category        VARCHAR(100) NOT NULL,
    date            DATE NOT NULL,
    description     VARCHAR(200) DEFAULT '',
    payment_method  VARCHAR(20) NOT NULL DEFAULT 'other'
                    CHECK (payment_method IN ('cash', 'card', 'upi', 'bank_transfer', 'other')),
    is_recurring    BOOLEAN NOT NULL DEFAULT FALSE,
    recurring_id    INT REFERENCES recurring_rules(id) ON DELETE SET NULL,
    occurrence_date DATE,
    created_at      TIMESTAMPTZ DEFAULT NOW(),
    updated_at      TIMESTAMPTZ DEFAULT NOW()
);

-- Budgets table: monthly spending limits per category
CREATE TABLE IF NOT EXISTS budgets (
    id              SERIAL PRIMARY KEY,
    user_id         INT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    category        VARCHAR(100) NOT NULL,
    limit_amount    NUMERIC(12,2) NOT NULL CHECK (limit_amount >= 0),
    month           SMALLINT NOT NULL CHECK (month BETWEEN 1 AND 12),
    year            INT NOT NULL,
    created_at      TIMESTAMPTZ DEFAULT NOW(),
    UNIQUE(user_id, category, month, year)
);

-- Indexes for faster queries
CREATE INDEX IF NOT EXISTS idx_transactions_user_date ON transactions(user_id, date DESC);
CREATE INDEX IF NOT EXISTS idx_transactions_category ON transactions(user_id, type, category);
CREATE INDEX IF NOT EXISTS idx_recurring_user_status ON recurring_rules(user_id, status);

-- One ledger entry per rule per run day (occurrence_date is engine-owned)
ALTER TABLE transactions ADD COLUMN IF NOT EXISTS occurrence_date DATE;
DROP INDEX IF EXISTS uq_transactions_occurrence;
CREATE UNIQUE INDEX IF NOT EXISTS uq_transactions_rule_occurrence
    ON transactions(recurring_id, occurrence_date) WHERE recurring_id IS NOT NULL;
"""


def create_tables() -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    conn = get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)
        conn.commit()
        logger.info("Database schema initialized successfully.")
    except Exception as e:
        conn.rollback()
        logger.error(f"Failed to initialize schema: {e}")
        raise
    finally:
        release_connection(conn)


if __name__ == "__main__":
    from db.connection import init_pool
    init_pool()
    create_tables()
    print("Database schema created successfully.")
