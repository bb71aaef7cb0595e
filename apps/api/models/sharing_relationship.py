"""SharingRelationship model for owner-to-viewer sharing history."""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from database import Base


class SharingRelationship(Base):
    """Records that an owner has shared at least one rating with a viewer."""

    __tablename__ = "sharing_relationships"
    __table_args__ = (
        UniqueConstraint("owner_id", "viewer_id", name="uq_sharing_relationship"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    viewer_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    last_shared_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    owner = relationship("User", foreign_keys=[owner_id])
    viewer = relationship("User", foreign_keys=[viewer_id])
