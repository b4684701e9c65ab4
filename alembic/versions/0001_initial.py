"""initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18 00:00:00
"""
from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        "order_risk",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("order_id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64)),
        sa.Column("total_amount", sa.Float),
        sa.Column("score", sa.Integer, nullable=False),
        sa.Column("level", sa.String(12)),
        sa.Column("signals", sa.JSON),
        sa.Column("recommendation", sa.Text),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index("ix_order_risk_order_id", "order_risk", ["order_id"], unique=True)
    op.create_index("ix_order_risk_user_id", "order_risk", ["user_id"])
    op.create_index("ix_order_risk_level", "order_risk", ["level"])

    op.create_table(
        "evidence_log",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("order_id", sa.String(64), nullable=False),
        sa.Column("key", sa.String(32)),
        sa.Column("value", sa.JSON),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index("ix_evidence_log_order_id", "evidence_log", ["order_id"])

def downgrade():
    op.drop_index("ix_evidence_log_order_id", table_name="evidence_log")
    op.drop_table("evidence_log")
    op.drop_index("ix_order_risk_level", table_name="order_risk")
    op.drop_index("ix_order_risk_user_id", table_name="order_risk")
    op.drop_index("ix_order_risk_order_id", table_name="order_risk")
    op.drop_table("order_risk")
