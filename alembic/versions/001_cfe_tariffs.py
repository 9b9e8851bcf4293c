"""CFE tariff catalog.

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""
from __future__ import annotations

from typing import Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, tuple[str, ...], None] = None
depends_on: Union[str, tuple[str, ...], None] = None

# Residential and commercial categories published by CFE
_TARIFFS: list[tuple[int, str, str]] = [
    (1, "1", "Doméstica"),
    (2, "1A", "Doméstica, temperatura media mínima en verano de 25 °C"),
    (3, "1B", "Doméstica, temperatura media mínima en verano de 28 °C"),
    (4, "1C", "Doméstica, temperatura media mínima en verano de 30 °C"),
    (5, "1D", "Doméstica, temperatura media mínima en verano de 31 °C"),
    (6, "1E", "Doméstica, temperatura media mínima en verano de 32 °C"),
    (7, "1F", "Doméstica, temperatura media mínima en verano de 33 °C"),
    (8, "DAC", "Doméstica de alto consumo"),
    (9, "PDBT", "Pequeña demanda en baja tensión"),
    (10, "GDBT", "Gran demanda en baja tensión"),
    (11, "GDMTO", "Gran demanda en media tensión ordinaria"),
    (12, "GDMTH", "Gran demanda en media tensión horaria"),
]


def upgrade() -> None:
    cfe_tariffs = op.create_table(
        "cfe_tariffs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("tariff_code", sa.String(20), nullable=False),
        sa.Column("description", sa.String(255)),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("tariff_code"),
    )
    op.bulk_insert(
        cfe_tariffs,
        [{"id": id_, "tariff_code": code, "description": desc} for id_, code, desc in _TARIFFS],
    )


def downgrade() -> None:
    op.drop_table("cfe_tariffs")
