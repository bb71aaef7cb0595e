"""Rating model and the rating viewer association table."""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from database import Base


rating_viewers = Table(
    "rating_viewers",
    Base.metadata,
    Column("rating_id", Integer, ForeignKey("ratings.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True),
)


class Rating(Base):
    """A private grade/note on a catalog item, owned by exactly one author."""

    __tablename__ = "ratings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    grade = Column(Float, nullable=False)
    note = Column(Text, nullable=False, default="")
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    item_type = Column(String(50), nullable=False, index=True)
    item_id = Column(Integer, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    author = relationship("User", foreign_keys=[user_id])
    # Viewer rows are written through the association table directly, never via this collection.
    viewers = relationship("User", secondary=rating_viewers, viewonly=True, order_by="User.display_name")

    def is_visible_to(self, user_id: str) -> bool:
        """Author always sees the rating; anyone else must be an explicit viewer."""
        if self.user_id == user_id:
            return True
        return any(viewer.id == user_id for viewer in self.viewers)
