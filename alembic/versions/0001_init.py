"""init
Revision ID: 0001_init
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        "candidaturas",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("nome", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("telefone", sa.String(length=30), nullable=False),
        sa.Column("idade", sa.Integer(), nullable=True),
        sa.Column("cidade", sa.String(length=120), nullable=True),
        sa.Column("experiencia", sa.Text(), nullable=True),
        sa.Column("disponibilidade", sa.String(length=60), nullable=True),
        sa.Column("foto_url", sa.String(length=500), nullable=True),
        sa.Column("termos", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("extra_fields", sa.JSON(), nullable=False, server_default=sa.text("'{}'")),
        sa.Column("timestamp", sa.String(length=40), nullable=False),
    )
    op.create_index("ix_candidaturas_email", "candidaturas", ["email"])
    op.create_index("ix_candidaturas_timestamp", "candidaturas", ["timestamp"])

def downgrade():
    op.drop_index("ix_candidaturas_timestamp", table_name="candidaturas")
    op.drop_index("ix_candidaturas_email", table_name="candidaturas")
    op.drop_table("candidaturas")
