"""Tag model: a short unique label attached to recipes."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from cookbook.database import Base
from cookbook.models.base import AuditMixin

NAME_MAX_LENGTH = 100


class Tag(AuditMixin, Base):
    __tablename__ = "tags"

    name: Mapped[str] = mapped_column(
        String(NAME_MAX_LENGTH),
        nullable=False,
        unique=True,
        comment="Tag label, unique across all rows",
    )

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name='{self.name}')>"
