"""Initial schema — consultant registry and assignment history.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Consultores
    op.create_table(
        "consultores",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("nome", sa.String(200), nullable=False),
        sa.Column("email", sa.String(254), nullable=False),
        sa.Column("natureza", sa.String(100), nullable=False),
        sa.Column("cidade", sa.String(100), nullable=False),
        sa.Column(
            "ativo_na_roleta", sa.Boolean, nullable=False, server_default=sa.text("true")
        ),
        sa.Column(
            "data_ultima_indicacao",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("'1970-01-01 00:00:00+00'"),
        ),
    )
    op.create_index(
        "idx_consultores_fila",
        "consultores",
        ["natureza", "cidade", "ativo_na_roleta", "data_ultima_indicacao", "id"],
    )

    # Indicacoes
    op.create_table(
        "indicacoes",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "consultor_id",
            sa.Integer,
            sa.ForeignKey("consultores.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("nome_corretor", sa.String(200), nullable=True),
        sa.Column("unidade_corretor", sa.String(200), nullable=True),
        sa.Column("natureza", sa.String(100), nullable=False),
        sa.Column("cidade", sa.String(100), nullable=False),
        sa.Column("nome_cliente", sa.String(200), nullable=False),
        sa.Column("tel_cliente", sa.String(50), nullable=True),
        sa.Column("descricao_situacao", sa.Text, nullable=True),
        sa.Column("status", sa.String(50), nullable=False, server_default="Pendente"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("idx_indicacoes_consultor", "indicacoes", ["consultor_id"])
    op.create_index("idx_indicacoes_cidade", "indicacoes", ["cidade"])
    op.create_index("idx_indicacoes_created_at", "indicacoes", ["created_at"])


def downgrade() -> None:
    op.drop_table("indicacoes")
    op.drop_table("consultores")
