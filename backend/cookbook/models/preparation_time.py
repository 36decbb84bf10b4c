"""Preparation time model: how long a recipe takes, in minutes."""

from sqlalchemy import Integer
from sqlalchemy.orm import Mapped, mapped_column

from cookbook.database import Base
from cookbook.models.base import AuditMixin

DURATION_MIN = 1
DURATION_MAX = 100


class PreparationTime(AuditMixin, Base):
    __tablename__ = "preparation_times"

    duration: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Preparation time in minutes",
    )

    def __repr__(self) -> str:
        return f"<PreparationTime(id={self.id}, duration={self.duration})>"
