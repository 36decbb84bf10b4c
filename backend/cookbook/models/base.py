"""
Cookbook Services — Shared Model Columns
==========================================

What:  Identity, audit and soft-delete columns common to every resource table.
How:   A mixin combined with ``Base`` in each concrete model.

Column semantics:
    id          UUID generated on insert (the migration also sets a
                gen_random_uuid() server default for rows inserted by SQL)
    created_at  set once on insert
    updated_at  set on insert and on every UPDATE statement
    deleted_at  NULL while the row is live; set by a soft delete
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditMixin:
    """Primary key, audit timestamps and the soft-delete marker."""

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier, generated on insert",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        comment="When the row was created (UTC)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        comment="When the row was last modified (UTC)",
    )

    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
        index=True,
        comment="Soft-delete marker; NULL while the row is live",
    )
