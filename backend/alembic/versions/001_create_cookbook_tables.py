"""Create recipe and metadata tables

Revision ID: 001
Revises: None
Create Date: 2024-03-01 00:00:00.000000+00:00

What:  Initial schema for both services. Every table carries a UUID primary
       key generated by the database, audit timestamps and an indexed
       deleted_at soft-delete marker.

Tables:
    recipes                                recipe service
    tags, categories, cuisine_types        metadata service, unique name
    difficulty_levels                      metadata service, unique level 1-5
    preparation_times                      metadata service, duration in minutes

Rollback: downgrade() drops every table (destructive).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _audit_columns() -> list:
    """Identity, audit and soft-delete columns shared by every table."""
    return [
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
            comment="Unique identifier, generated on insert",
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When the row was created (UTC)",
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When the row was last modified (UTC)",
        ),
        sa.Column(
            "deleted_at",
            sa.TIMESTAMP(timezone=True),
            nullable=True,
            comment="Soft-delete marker; NULL while the row is live",
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "recipes",
        *_audit_columns(),
        sa.Column("name", sa.Text(), nullable=False, comment="Recipe title"),
        sa.Column(
            "description",
            sa.Text(),
            nullable=False,
            comment="Free-text description, at most 65535 bytes",
        ),
        sa.Column(
            "serving_count",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("0"),
            comment="Number of servings the recipe yields",
        ),
        sa.Column(
            "author_id",
            sa.String(255),
            nullable=True,
            comment="Subject of the user who created the recipe",
        ),
        sa.Column(
            "image_name",
            sa.String(255),
            nullable=True,
            comment="Name of the recipe image in the image store",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_recipes"),
    )
    op.create_index("ix_recipes_deleted_at", "recipes", ["deleted_at"])

    for table, comment in (
        ("tags", "Tag label, unique across all rows"),
        ("categories", "Category name, unique across all rows"),
        ("cuisine_types", "Cuisine name, unique across all rows"),
    ):
        op.create_table(
            table,
            *_audit_columns(),
            sa.Column("name", sa.String(100), nullable=False, comment=comment),
            sa.PrimaryKeyConstraint("id", name=f"pk_{table}"),
            sa.UniqueConstraint("name", name=f"uq_{table}_name"),
        )
        op.create_index(f"ix_{table}_deleted_at", table, ["deleted_at"])

    op.create_table(
        "difficulty_levels",
        *_audit_columns(),
        sa.Column(
            "level",
            sa.Integer(),
            nullable=False,
            comment="Difficulty rating 1-5, unique across all rows",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_difficulty_levels"),
        sa.UniqueConstraint("level", name="uq_difficulty_levels_level"),
        sa.CheckConstraint("level BETWEEN 1 AND 5", name="ck_difficulty_levels_level"),
    )
    op.create_index("ix_difficulty_levels_deleted_at", "difficulty_levels", ["deleted_at"])

    op.create_table(
        "preparation_times",
        *_audit_columns(),
        sa.Column(
            "duration",
            sa.Integer(),
            nullable=False,
            comment="Preparation time in minutes",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_preparation_times"),
        sa.CheckConstraint(
            "duration BETWEEN 1 AND 100", name="ck_preparation_times_duration"
        ),
    )
    op.create_index("ix_preparation_times_deleted_at", "preparation_times", ["deleted_at"])


def downgrade() -> None:
    for table in (
        "preparation_times",
        "difficulty_levels",
        "cuisine_types",
        "categories",
        "tags",
        "recipes",
    ):
        op.drop_index(f"ix_{table}_deleted_at", table_name=table)
        op.drop_table(table)
