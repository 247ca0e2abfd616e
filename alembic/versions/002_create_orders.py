"""002: create orders table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE orders (
            id                      VARCHAR(32)     PRIMARY KEY,
            user_id                 VARCHAR(64)     NOT NULL,
            have_currency           VARCHAR(3)      NOT NULL,
            have_amount             BIGINT          NOT NULL,
            want_currency           VARCHAR(3)      NOT NULL,
            want_amount             BIGINT          NOT NULL,
            status                  VARCHAR(16)     NOT NULL DEFAULT 'PENDING',
            details_accepted        BOOLEAN,
            counterparty_user_id    VARCHAR(64),
            counterparty_order_id   VARCHAR(32),
            rejects                 VARCHAR(32)[]   NOT NULL DEFAULT '{}',
            version                 INT             NOT NULL DEFAULT 0,
            created_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_orders_have_currency  CHECK (have_currency IN (
                'aud', 'cad', 'chf', 'cny', 'eur', 'gbp',
                'hkd', 'inr', 'jpy', 'nzd', 'sgd', 'usd')),
            CONSTRAINT ck_orders_want_currency  CHECK (want_currency IN (
                'aud', 'cad', 'chf', 'cny', 'eur', 'gbp',
                'hkd', 'inr', 'jpy', 'nzd', 'sgd', 'usd')),
            CONSTRAINT ck_orders_have_amount    CHECK (have_amount > 0),
            CONSTRAINT ck_orders_want_amount    CHECK (want_amount > 0),
            CONSTRAINT ck_orders_status         CHECK (status IN ('PENDING', 'CANCELLED', 'RESOLVED')),
            CONSTRAINT ck_orders_rejects_max    CHECK (cardinality(rejects) <= 3),
            CONSTRAINT ck_orders_details_iff_resolved CHECK (
                (status = 'RESOLVED'
                    AND details_accepted IS NOT NULL
                    AND counterparty_user_id IS NOT NULL
                    AND counterparty_order_id IS NOT NULL)
                OR
                (status <> 'RESOLVED'
                    AND details_accepted IS NULL
                    AND counterparty_user_id IS NULL
                    AND counterparty_order_id IS NULL)
            )
        );
    """)
    op.execute("CREATE INDEX idx_orders_user ON orders (user_id, created_at DESC);")
    # Candidate lookup: crossed currencies + amount range over live orders
    op.execute("""
        CREATE INDEX idx_orders_match
        ON orders (have_currency, want_currency, have_amount, created_at)
        WHERE status IN ('PENDING', 'RESOLVED');
    """)
    op.execute("""
        CREATE TRIGGER trg_orders_updated_at
            BEFORE UPDATE ON orders
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE orders IS 'Currency swap offers: have X of A, want Y of B';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS orders CASCADE;")
