"""User model."""
from sqlalchemy import Column, String, DateTime, JSON, Uuid, text
from uuid6 import uuid7

from accounts.common.database import Base


class User(Base):
    """User account with its credential hash and favorites."""
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid7)
    name = Column(String(100), nullable=False)
    username = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    favorites = Column(JSON, nullable=False, default=list)  # ordered reference ids
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=text("CURRENT_TIMESTAMP"))
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=text("CURRENT_TIMESTAMP"), onupdate=text("CURRENT_TIMESTAMP"))

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username})>"
