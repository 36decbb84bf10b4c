"""Category model: a unique grouping for recipes."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from cookbook.database import Base
from cookbook.models.base import AuditMixin

NAME_MAX_LENGTH = 100


class Category(AuditMixin, Base):
    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(
        String(NAME_MAX_LENGTH),
        nullable=False,
        unique=True,
        comment="Category name, unique across all rows",
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}')>"
