"""Asset model definitions (email templates and files owned by a user)."""

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from ibuddy.database import Base


class AssetType(str, Enum):
    EMAIL_TEMPLATE = "email-template"
    FILE = "file"


class AssetRecord(Base):
    """A named asset. A user who still owns assets cannot be deleted."""

    __tablename__ = "assets"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    owner_id: Mapped[str] = mapped_column(String(330), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("assetsByOwnerId", "owner_id"),
    )

    def __repr__(self) -> str:
        return f"<AssetRecord(id='{self.id}', owner_id='{self.owner_id}')>"
