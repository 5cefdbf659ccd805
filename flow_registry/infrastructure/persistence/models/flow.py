"""Flow and FlowSnapshot ORM models.

Flow = named, versioned entity. FlowSnapshot = one immutable version; metadata
(version, author, comments, timestamp) and contents share a row so both are
written by a single insert.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from flow_registry.infrastructure.persistence.database import Base
from flow_registry.infrastructure.persistence.models.mixins import (
    CuidMixin,
    TimestampMixin,
)


class Flow(TimestampMixin, Base):
    """Versioned flow. Table: flow. Primary key is the caller-visible identifier."""

    __tablename__ = "flow"

    identifier: Mapped[str] = mapped_column(String(255), primary_key=True)
    name: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    bucket_identifier: Mapped[str | None] = mapped_column(
        String(255), nullable=True, index=True
    )


class FlowSnapshot(CuidMixin, Base):
    """One version of a flow. Table: flow_snapshot. (flow_identifier, version) is unique."""

    __tablename__ = "flow_snapshot"

    flow_identifier: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("flow.identifier", ondelete="CASCADE"),
        nullable=False,
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    author: Mapped[str | None] = mapped_column(String(255), nullable=True)
    comments: Mapped[str | None] = mapped_column(Text, nullable=True)
    flow_contents: Mapped[dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"), nullable=False
    )
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint(
            "flow_identifier", "version", name="uq_flow_snapshot_flow_version"
        ),
        CheckConstraint("version >= 1", name="ck_flow_snapshot_version_positive"),
        Index("ix_flow_snapshot_flow_identifier", "flow_identifier"),
    )
