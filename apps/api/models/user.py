"""User model."""

from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.sql import func
import uuid

from database import Base


class User(Base):
    """User model for Google-authenticated users."""

    __tablename__ = "users"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))

    # OAuth identity
    google_id = Column(String(255), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    full_name = Column(String(255), nullable=True)
    avatar = Column(String(500), nullable=True)

    # Privacy
    display_name = Column(String(100), unique=True, nullable=True, index=True)
    discoverable = Column(Boolean, nullable=False, default=True)
    profile_completed = Column(Boolean, nullable=False, default=False)

    is_admin = Column(Boolean, nullable=False, default=False)

    last_login_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def has_completed_setup(self) -> bool:
        return bool(self.display_name) and bool(self.profile_completed)

    def generate_display_name(self) -> str:
        """Privacy-friendly display name hint ("First L.") derived from the full name."""
        parts = (self.full_name or "").split()
        if not parts:
            return ""
        if len(parts) == 1:
            return parts[0]
        return f"{parts[0]} {parts[-1][0].upper()}."
