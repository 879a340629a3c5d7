from sqlalchemy import String, Text, JSON, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from typing import Optional
from chatflow.database import Base
import uuid


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Chatflow(Base):
    __tablename__ = "chatflows"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    # The ChatflowSchema document; {} until generation produced one
    definition: Mapped[dict] = mapped_column("schema", JSON, nullable=False, default=dict)
    status: Mapped[str] = mapped_column(String, default="DRAFT")
    share_url: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)
    generation_status: Mapped[str] = mapped_column(String, default="PENDING")
    generation_error: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

