"""Difficulty level model: a unique rating from 1 (easy) to 5 (hard)."""

from sqlalchemy import Integer
from sqlalchemy.orm import Mapped, mapped_column

from cookbook.database import Base
from cookbook.models.base import AuditMixin

LEVEL_MIN = 1
LEVEL_MAX = 5


class DifficultyLevel(AuditMixin, Base):
    __tablename__ = "difficulty_levels"

    level: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        unique=True,
        comment="Difficulty rating 1-5, unique across all rows",
    )

    def __repr__(self) -> str:
        return f"<DifficultyLevel(id={self.id}, level={self.level})>"
