"""003: seed demo users and orders

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""

from typing import Sequence, Union

from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_USER_1 = "00000000-0000-4000-a000-000000000111"
_USER_2 = "00000000-0000-4000-a000-000000000222"
_USER_3 = "00000000-0000-4000-a000-000000000333"
_ADMIN = "00000000-0000-4000-a000-000000000999"


def upgrade() -> None:
    op.execute(f"""
        INSERT INTO users (id, name, email, role) VALUES
            ('{_USER_1}', 'user111', 'user111@fakemail.com', 'user'),
            ('{_USER_2}', 'user222', 'user222@fakemail.com', 'user'),
            ('{_USER_3}', 'user333', 'user333@fakemail.com', 'user'),
            ('{_ADMIN}',  'admin',   'admin@fakemail.com',   'admin');
    """)

    # user111 wants aud for nzd; user222 holds several candidates around the band
    op.execute(f"""
        INSERT INTO orders (id, user_id, have_currency, have_amount,
                            want_currency, want_amount, status,
                            details_accepted, counterparty_user_id, counterparty_order_id)
        VALUES
            ('DEMO-1', '{_USER_1}', 'nzd', 1000, 'aud',  900, 'PENDING',   NULL, NULL, NULL),
            ('DEMO-2', '{_USER_2}', 'aud', 1000, 'usd',  940, 'PENDING',   NULL, NULL, NULL),
            ('DEMO-3', '{_USER_2}', 'aud',  700, 'nzd', 1000, 'PENDING',   NULL, NULL, NULL),
            ('DEMO-4', '{_USER_2}', 'aud', 1100, 'nzd', 1000, 'PENDING',   NULL, NULL, NULL),
            ('DEMO-5', '{_USER_2}', 'aud',  900, 'nzd', 1000, 'PENDING',   NULL, NULL, NULL),
            ('DEMO-6', '{_USER_2}', 'aud',  900, 'nzd', 1000, 'CANCELLED', NULL, NULL, NULL),
            ('DEMO-7', '{_USER_3}', 'aud',  900, 'nzd', 1000, 'RESOLVED',  TRUE, '{_USER_1}', 'DEMO-1');
    """)


def downgrade() -> None:
    op.execute("DELETE FROM orders WHERE id LIKE 'DEMO-%';")
    op.execute(f"""
        DELETE FROM users WHERE id IN ('{_USER_1}', '{_USER_2}', '{_USER_3}', '{_ADMIN}');
    """)
