"""Cuisine type model: the culinary tradition a recipe belongs to."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from cookbook.database import Base
from cookbook.models.base import AuditMixin

NAME_MAX_LENGTH = 100


class CuisineType(AuditMixin, Base):
    __tablename__ = "cuisine_types"

    name: Mapped[str] = mapped_column(
        String(NAME_MAX_LENGTH),
        nullable=False,
        unique=True,
        comment="Cuisine name, unique across all rows",
    )

    def __repr__(self) -> str:
        return f"<CuisineType(id={self.id}, name='{self.name}')>"
