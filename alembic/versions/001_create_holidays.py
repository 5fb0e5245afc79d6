"""Create holidays table with (year, date, name) uniqueness

Revision ID: 001_create_holidays
Revises:
Create Date: Holidays table, unique key and date/year lookup indexes

"""
from alembic import op  # type: ignore
import sqlalchemy as sa  # type: ignore
from sqlalchemy.dialects import mysql  # type: ignore


revision = "001_create_holidays"
down_revision = None
branch_labels = None
depends_on = None

# Microsecond instants on MySQL; SQLite and others keep the generic type
INSTANT = sa.DateTime().with_variant(mysql.DATETIME(fsp=6), "mysql")


def upgrade() -> None:
    op.create_table(
        "holidays",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "name",
            sa.String(120).with_variant(mysql.VARCHAR(120, collation="utf8mb4_bin"), "mysql"),
            nullable=False,
        ),
        sa.Column(
            "type",
            sa.Enum("Gazetted", "Restricted", "Observance", name="holiday_type"),
            nullable=False,
        ),
        sa.Column("date", INSTANT, nullable=False, comment="Midnight IST of the holiday, stored as UTC"),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("notes", sa.String(300), nullable=True),
        sa.Column("created_at", INSTANT, nullable=False),
        sa.Column("updated_at", INSTANT, nullable=False),
        sa.UniqueConstraint("year", "date", "name", name="uq_holiday_year_date_name"),
    )
    op.create_index("idx_holiday_date", "holidays", ["date"])
    op.create_index("idx_holiday_year", "holidays", ["year"])


def downgrade() -> None:
    op.drop_index("idx_holiday_year", table_name="holidays")
    op.drop_index("idx_holiday_date", table_name="holidays")
    op.drop_table("holidays")
