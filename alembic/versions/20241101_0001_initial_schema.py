"""Tenants, buildings, documents and audit events"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "20241101_0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


DOCUMENT_STATUS_VALUES = ("gällande", "osäker", "ersatt")


def upgrade() -> None:
    op.create_table(
        "tenants",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "buildings",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("address", sa.String(), nullable=False),
        sa.Column("tenant_id", sa.Integer(), sa.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_buildings_tenant_id", "buildings", ["tenant_id"])

    op.create_table(
        "documents",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("filename", sa.String(), nullable=False),
        sa.Column("document_type", sa.String(), nullable=False),
        sa.Column("building_id", sa.Integer(), sa.ForeignKey("buildings.id", ondelete="CASCADE"), nullable=False),
        sa.Column("status", sa.Enum(*DOCUMENT_STATUS_VALUES, name="document_status"), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("uploaded_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("file_url", sa.String(), nullable=False),
    )
    op.create_index(
        "ix_documents_building_type_year",
        "documents",
        ["building_id", "document_type", "year"],
    )

    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("tenant_id", sa.Integer(), sa.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False),
        sa.Column("building_id", sa.Integer(), sa.ForeignKey("buildings.id", ondelete="CASCADE"), nullable=True),
        sa.Column("document_id", sa.Integer(), sa.ForeignKey("documents.id", ondelete="SET NULL"), nullable=True),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("data", sa.JSON(), nullable=False),
        sa.Column("at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
    )
    op.create_index("ix_events_tenant_id", "events", ["tenant_id"])


def downgrade() -> None:
    op.drop_index("ix_events_tenant_id", table_name="events")
    op.drop_table("events")
    op.drop_index("ix_documents_building_type_year", table_name="documents")
    op.drop_table("documents")
    op.drop_index("ix_buildings_tenant_id", table_name="buildings")
    op.drop_table("buildings")
    op.drop_table("tenants")

    sa.Enum(*DOCUMENT_STATUS_VALUES, name="document_status").drop(op.get_bind(), checkfirst=True)
