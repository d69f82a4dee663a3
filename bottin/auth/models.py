# bottin/auth/models.py
from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text

from bottin.db.session import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)  # hash bcrypt
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    profile_image = Column(Text, nullable=True)
    bio = Column(Text, nullable=True)
    discipline = Column(String(100), nullable=True, index=True)
    location = Column(String(255), nullable=True)
    website = Column(Text, nullable=True)
    social_media = Column(JSON, nullable=True)
    cv = Column(Text, nullable=True)
    is_approved = Column(Boolean, nullable=False, default=False, index=True)
    is_admin = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}', approved={self.is_approved})>"

    @property
    def full_name(self):
        """Propriété calculée pour le nom complet"""
        return f"{self.first_name} {self.last_name}".strip()


class UserSession(Base):
    """Session serveur référencée par le cookie dam_session."""

    __tablename__ = "sessions"

    id = Column(String(36), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    is_admin = Column(Boolean, nullable=False, default=False)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<UserSession(id={self.id}, user_id={self.user_id})>"
