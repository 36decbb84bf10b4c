"""
Cookbook Services — Recipe Model
==================================

What:  ORM model for the ``recipes`` table.

Ownership:
    author_id and image_name are owned by the server. author_id is filled
    from the authenticated user on create; neither is ever written by an
    update.
"""

from typing import Optional

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from cookbook.database import Base
from cookbook.models.base import AuditMixin

# Description limit in bytes (UTF-8), matching the 64 KiB text column
DESCRIPTION_MAX_BYTES = 65535


class Recipe(AuditMixin, Base):
    """A recipe row. Soft-deleted rows keep their data but are never read."""

    __tablename__ = "recipes"

    name: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Recipe title",
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Free-text description, at most 65535 bytes",
    )

    serving_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Number of servings the recipe yields",
    )

    author_id: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="Subject of the user who created the recipe",
    )

    image_name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="Name of the recipe image in the image store",
    )

    def __repr__(self) -> str:
        return f"<Recipe(id={self.id}, name='{self.name}')>"
