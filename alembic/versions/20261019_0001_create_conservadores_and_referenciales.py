"""create conservadores and referenciales tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 10:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "conservadores",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("nombre", sa.String(length=255), nullable=False),
        sa.Column("nombre_normalizado", sa.String(length=255), nullable=False),
        sa.Column("direccion", sa.String(length=255), nullable=False),
        sa.Column("comuna", sa.String(length=120), nullable=False),
        sa.Column("region", sa.String(length=120), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_conservadores_region_comuna",
        "conservadores",
        ["region", "comuna"],
        unique=False,
    )
    op.create_index(
        "ix_conservadores_nombre_normalizado",
        "conservadores",
        ["nombre_normalizado"],
        unique=False,
    )

    op.create_table(
        "referenciales",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("lat", sa.Float(), nullable=False),
        sa.Column("lng", sa.Float(), nullable=False),
        sa.Column("fojas", sa.String(length=32), nullable=False, comment="Folio, e.g. 100 or 100 vta"),
        sa.Column("numero", sa.Integer(), nullable=False),
        sa.Column("anio", sa.Integer(), nullable=False),
        sa.Column("cbr", sa.String(length=255), nullable=False, comment="Registry office name as imported"),
        sa.Column("comprador", sa.String(length=255), nullable=False),
        sa.Column("vendedor", sa.String(length=255), nullable=False),
        sa.Column("predio", sa.String(length=255), nullable=False),
        sa.Column("comuna", sa.String(length=120), nullable=False),
        sa.Column("rol", sa.String(length=64), nullable=False, comment="Cadastral role (rol de avalúo)"),
        sa.Column("fechaescritura", sa.Date(), nullable=False),
        sa.Column("superficie", sa.Float(), nullable=False),
        sa.Column("monto", sa.BigInteger(), nullable=False),
        sa.Column("observaciones", sa.Text(), nullable=True),
        sa.Column("user_id", sa.String(length=255), nullable=False, comment="Opaque id of the uploading user"),
        sa.Column("conservador_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["conservador_id"], ["conservadores.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_referenciales_user_id", "referenciales", ["user_id"], unique=False)
    op.create_index("ix_referenciales_conservador_id", "referenciales", ["conservador_id"], unique=False)
    op.create_index("ix_referenciales_comuna", "referenciales", ["comuna"], unique=False)
    op.create_index("ix_referenciales_fechaescritura", "referenciales", ["fechaescritura"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_referenciales_fechaescritura", table_name="referenciales")
    op.drop_index("ix_referenciales_comuna", table_name="referenciales")
    op.drop_index("ix_referenciales_conservador_id", table_name="referenciales")
    op.drop_index("ix_referenciales_user_id", table_name="referenciales")
    op.drop_table("referenciales")
    op.drop_index("ix_conservadores_nombre_normalizado", table_name="conservadores")
    op.drop_index("ix_conservadores_region_comuna", table_name="conservadores")
    op.drop_table("conservadores")
