from __future__ import annotations

from datetime import datetime

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from movies_library.db.base_class import Base


class StorageEntry(Base):
    __tablename__ = "storage_entries"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)

    # one namespace per browser client (the wishlist cookie value)
    namespace: Mapped[str] = mapped_column(sa.String(64), nullable=False)
    key: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    value: Mapped[str] = mapped_column(sa.Text, nullable=False)

    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        server_default=sa.func.now(),
        onupdate=sa.func.now(),
        nullable=False,
    )

    __table_args__ = (
        sa.UniqueConstraint("namespace", "key", name="uq_storage_entries_namespace_key"),
        sa.Index("ix_storage_entries_namespace", "namespace"),
    )
